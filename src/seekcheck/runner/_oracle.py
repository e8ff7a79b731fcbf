# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import logging
import math
from typing import Optional

from seekcheck._constants import FRAME_ID_CHANNEL_BITS, SOURCE_FPS
from seekcheck._errors import VerificationError
from seekcheck._frame import Frame, VIDEO_PIXEL_FORMATS
from seekcheck._variant import Variant

logger = logging.getLogger(__name__)

N = FRAME_ID_CHANNEL_BITS
TOLERANCE_SECONDS = 1.0 / SOURCE_FPS


def _exceeds_tolerance(diff: float) -> bool:
    # One frame period, up to rounding errors, is still within tolerance.
    return diff > TOLERANCE_SECONDS and not math.isclose(diff, TOLERANCE_SECONDS)


def first_pixel_word(frame: Frame) -> int:
    """Return the first pixel of a video frame as the 32-bit value a BGRA
    pixel reads as in little-endian memory: ``a<<24 | r<<16 | g<<8 | b``.

    Alpha is 0xff for formats without an alpha channel.
    """
    layout = VIDEO_PIXEL_FORMATS[frame.pix_fmt]
    pixel = dict(zip(layout, frame.data[0, 0].tolist()))
    return pixel.get("A", 0xFF) << 24 | pixel["R"] << 16 | pixel["G"] << 8 | pixel["B"]


def decode_frame_id(frame: Frame) -> int:
    """Decode the frame identifier color-coded in the first pixel of a frame.

    The identifier is 12 bits wide, split in three nibbles stored in the high
    half of the red, green and blue channels.
    """
    c = first_pixel_word(frame)
    r = c >> (N + 16) & 0xF
    g = c >> (N + 8) & 0xF
    b = c >> (N + 0) & 0xF
    return r << (N * 2) | g << N | b


def playback_time(t: float, variant: Variant) -> float:
    return min(max(t, 0.0), variant.trim_duration_seconds)


def check_frame(frame: Optional[Frame], t: float, variant: Variant) -> None:
    """Check that ``frame`` is the one expected when requesting time ``t``.

    The time of the frame is estimated from its timestamp and, for video, from
    the identifier encoded in its pixels. Both estimates must be within one
    source frame period of the requested time, clipped to the trimmed
    duration.

    Raises:
        VerificationError: if the frame is missing or one of the estimates is
            off by more than ``1 / SOURCE_FPS``.
    """
    skip = variant.skip_seconds
    trim_duration = variant.trim_duration_seconds
    expected_time = playback_time(t, variant)

    if frame is None:
        logger.error("requested t=%f but got no frame", t)
        raise VerificationError(
            f"No frame returned for t={t}",
            requested_time=t,
            playback_time=expected_time,
        )

    frame_ts = frame.pts_seconds
    estimated_time_from_ts = frame_ts - skip
    diff_ts = abs(expected_time - estimated_time_from_ts)

    if not variant.audio:
        frame_id = decode_frame_id(frame)
        video_ts = frame_id / SOURCE_FPS
        estimated_time_from_color = video_ts - skip
        diff_color = abs(expected_time - estimated_time_from_color)

        if _exceeds_tolerance(diff_color):
            logger.error(
                "requested t=%f (clipped to %f with trim_duration=%f),\n"
                "got video_ts=%f (frame id #%d), corresponding to t=%f (with skip=%f)\n"
                "diff_color: %f",
                t,
                expected_time,
                trim_duration,
                video_ts,
                frame_id,
                estimated_time_from_color,
                skip,
                diff_color,
            )
            raise VerificationError(
                f"Frame color identifies t={estimated_time_from_color}, "
                f"expected t={expected_time}",
                requested_time=t,
                playback_time=expected_time,
                estimated_time=estimated_time_from_color,
                diff=diff_color,
            )

    if _exceeds_tolerance(diff_ts):
        logger.error(
            "requested t=%f (clipped to %f with trim_duration=%f),\n"
            "got frame_ts=%f, corresponding to t=%f (with skip=%f)\n"
            "diff_ts: %f",
            t,
            expected_time,
            trim_duration,
            frame_ts,
            estimated_time_from_ts,
            skip,
            diff_ts,
        )
        raise VerificationError(
            f"Frame timestamp corresponds to t={estimated_time_from_ts}, "
            f"expected t={expected_time}",
            requested_time=t,
            playback_time=expected_time,
            estimated_time=estimated_time_from_ts,
            diff=diff_ts,
        )
