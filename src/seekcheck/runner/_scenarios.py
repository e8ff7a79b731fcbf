# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import logging
from typing import Any, List

from seekcheck._constants import (
    EXPECTED_IMAGE_HEIGHT,
    EXPECTED_IMAGE_WIDTH,
    NOT_AVAILABLE_FILE,
)
from seekcheck._errors import SubjectError, VerificationError
from seekcheck._variant import AUDIO_VARIANTS, VIDEO_VARIANTS
from seekcheck.runner._sweep import run_tests_all_combinations
from seekcheck.subjects import Source, SubjectFactory

logger = logging.getLogger(__name__)


def run_image_test(subject_factory: SubjectFactory, image: Source) -> None:
    """Check that a still image is played at any time, with the expected size."""
    with subject_factory(image) as subject:
        frame = subject.get_frame(53.0)
        if frame is None:
            logger.error("didn't get an image")
            raise VerificationError(f"No frame returned for image {image}")

        try:
            info = subject.get_info()
        except SubjectError:
            logger.error("can not fetch image info")
            subject.release_frame(frame)
            raise
        if info.width != EXPECTED_IMAGE_WIDTH or info.height != EXPECTED_IMAGE_HEIGHT:
            logger.error("image isn't the expected size")
            subject.release_frame(frame)
            raise VerificationError(
                f"Image is {info.width}x{info.height}, expected "
                f"{EXPECTED_IMAGE_WIDTH}x{EXPECTED_IMAGE_HEIGHT}"
            )
        subject.release_frame(frame)


def run_not_available_file_test(
    subject_factory: SubjectFactory, source: Source = NOT_AVAILABLE_FILE
) -> int:
    """Request frames from a missing media: the subject must not fail, and must
    report its errors to the registered log sink with the registered context.

    Returns:
        int: The number of messages received by the log sink.
    """
    context = object()
    wrong_contexts: List[Any] = []
    num_messages = 0

    def log_callback(arg: Any, level: int, message: str) -> None:
        nonlocal num_messages
        if arg is not context:
            wrong_contexts.append(arg)
        num_messages += 1
        print(f"message={message} level={level}")

    with subject_factory(source) as subject:
        subject.set_log_sink(context, log_callback)
        for t in (-1, 1.0, 3.0):
            subject.release_frame(subject.get_frame(t))

    if wrong_contexts:
        raise VerificationError(
            f"The log sink was called with {len(wrong_contexts)} unexpected context(s)"
        )
    return num_messages


def run_next_frame_test(
    subject_factory: SubjectFactory, source: Source, num_runs: int = 2
) -> List[int]:
    """Walk the media frame by frame until the end, ``num_runs`` times.

    Returns:
        list of int: The number of frames of each run.
    """
    frame_counts = []
    with subject_factory(source) as subject:
        subject.set_option("auto_hwaccel", False)
        i = 0
        for r in range(num_runs):
            print(f"Test: run_next_frame_test run #{r + 1}")
            num_frames = 0
            while (frame := subject.get_next_frame()) is not None:
                print(
                    f"frame #{i} / ts:{frame.pts_seconds:f} "
                    f"{frame.width}x{frame.height} linesize:{frame.linesize} "
                    f"pix_fmt:{frame.pix_fmt}"
                )
                i += 1
                num_frames += 1
                subject.release_frame(frame)
            print("null frame")
            if num_frames == 0:
                raise VerificationError(f"Run #{r + 1} didn't return any frame")
            frame_counts.append(num_frames)
    return frame_counts


def run_all(
    subject_factory: SubjectFactory,
    media: Source,
    image: Source,
    *,
    audio: bool = False,
) -> None:
    """Run every scenario, stopping at the first failure.

    The audio sweeps are only run when ``audio`` is True.

    Raises:
        SeekcheckError: on the first failure.
    """
    run_image_test(subject_factory, image)
    run_not_available_file_test(subject_factory)
    run_next_frame_test(subject_factory, media)

    variants = VIDEO_VARIANTS + (AUDIO_VARIANTS if audio else ())
    for variant in variants:
        run_tests_all_combinations(subject_factory, media, variant)

    print("All tests OK")
