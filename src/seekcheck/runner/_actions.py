# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import logging
from typing import Callable, Optional

from seekcheck._constants import (
    EXPECTED_MEDIA_HEIGHT,
    EXPECTED_MEDIA_WIDTH,
    SOURCE_FPS,
)
from seekcheck._errors import VerificationError
from seekcheck._frame import Frame
from seekcheck._variant import Variant
from seekcheck.combinations import Action
from seekcheck.runner._oracle import check_frame
from seekcheck.subjects import Subject

logger = logging.getLogger(__name__)

ActionHandler = Callable[[Subject, Variant], None]


def action_prefetch(subject: Subject, variant: Variant) -> None:
    subject.prefetch()


def action_fetch_info(subject: Subject, variant: Variant) -> None:
    info = subject.get_info()
    if info.width != EXPECTED_MEDIA_WIDTH or info.height != EXPECTED_MEDIA_HEIGHT:
        logger.error(
            "got media size %dx%d, expected %dx%d",
            info.width,
            info.height,
            EXPECTED_MEDIA_WIDTH,
            EXPECTED_MEDIA_HEIGHT,
        )
        raise VerificationError(
            f"Media is {info.width}x{info.height}, expected "
            f"{EXPECTED_MEDIA_WIDTH}x{EXPECTED_MEDIA_HEIGHT}"
        )


def action_start(subject: Subject, variant: Variant) -> None:
    frame = subject.get_frame(0)
    check_frame(frame, 0, variant)
    subject.release_frame(frame)


def _check_no_frame(subject: Subject, frame: Optional[Frame], t: float) -> None:
    if frame is not None:
        logger.error("requested t=%f, got a frame at %f", t, frame.pts_seconds)
        subject.release_frame(frame)
        raise VerificationError(
            f"Got a frame for t={t} where none was expected", requested_time=t
        )


def action_middle(subject: Subject, variant: Variant) -> None:
    f0 = subject.get_frame(30.0)
    f1 = subject.get_frame(30.1)
    f2 = subject.get_frame(30.2)
    f3 = subject.get_frame(15.0)
    f4 = subject.get_next_frame()
    f5 = subject.get_next_frame()

    check_frame(f0, 30.0, variant)
    check_frame(f1, 30.1, variant)
    check_frame(f2, 30.2, variant)
    check_frame(f3, 15.0, variant)
    check_frame(f4, 15.0 + 1 / SOURCE_FPS, variant)
    check_frame(f5, 15.0 + 2 / SOURCE_FPS, variant)

    for frame in (f0, f5, f1, f4, f2, f3):
        subject.release_frame(frame)

    f0 = subject.get_next_frame()
    f1 = subject.get_frame(16.0)
    f2 = subject.get_frame(16.001)

    check_frame(f0, 15.0 + 3 / SOURCE_FPS, variant)
    check_frame(f1, 16.0, variant)
    _check_no_frame(subject, f2, 16.001)

    subject.release_frame(f1)
    subject.release_frame(f0)


def action_end(subject: Subject, variant: Variant) -> None:
    frame = subject.get_frame(999999.0)
    if frame is None:
        logger.error("requested t=%f past the end, got no frame", 999999.0)
        raise VerificationError(
            "No frame returned past the end of the media", requested_time=999999.0
        )
    subject.release_frame(frame)

    frame = subject.get_frame(99999.0)
    _check_no_frame(subject, frame, 99999.0)


ACTION_HANDLERS: dict[Action, ActionHandler] = {
    Action.PREFETCH: action_prefetch,
    Action.FETCH_INFO: action_fetch_info,
    Action.START: action_start,
    Action.MIDDLE: action_middle,
    Action.END: action_end,
}
