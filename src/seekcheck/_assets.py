# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Generation of the test media.

Every frame of the test video is filled with a single color encoding the
frame index: the 12-bit index is split in three nibbles, stored in the high
half of the red, green and blue channels. The low half of each channel is set
to 0x8 so that small color conversion errors don't change the decoded nibble.
"""

import shutil
import subprocess
from pathlib import Path
from typing import Tuple, Union

import torch
from PIL import Image

from seekcheck._constants import (
    EXPECTED_IMAGE_HEIGHT,
    EXPECTED_IMAGE_WIDTH,
    EXPECTED_MEDIA_HEIGHT,
    EXPECTED_MEDIA_WIDTH,
    FRAME_ID_CHANNEL_BITS,
    SOURCE_FPS,
)

N = FRAME_ID_CHANNEL_BITS
MAX_FRAME_ID = (1 << (3 * N)) - 1


def frame_color(frame_id: int) -> Tuple[int, int, int]:
    """Return the (red, green, blue) color encoding ``frame_id``."""
    if not 0 <= frame_id <= MAX_FRAME_ID:
        raise ValueError(f"frame_id ({frame_id}) must be in [0, {MAX_FRAME_ID}]")
    r = frame_id >> (N * 2) & 0xF
    g = frame_id >> N & 0xF
    b = frame_id & 0xF
    return tuple(nibble << N | 1 << (N - 1) for nibble in (r, g, b))


def make_frame_data(
    frame_id: int, *, width: int, height: int, channels: str = "BGRA"
) -> torch.Tensor:
    """Return a (height, width, len(channels)) uint8 frame filled with the
    color of ``frame_id``, channels laid out in the order of ``channels``."""
    r, g, b = frame_color(frame_id)
    values = {"R": r, "G": g, "B": b, "A": 0xFF}
    pixel = torch.tensor([values[c] for c in channels], dtype=torch.uint8)
    return pixel.expand(height, width, len(channels)).contiguous()


def generate_test_video(
    path: Union[str, Path],
    *,
    duration_seconds: float = 60.0,
    fps: int = SOURCE_FPS,
    width: int = EXPECTED_MEDIA_WIDTH,
    height: int = EXPECTED_MEDIA_HEIGHT,
    with_audio: bool = True,
) -> Path:
    """Write the color-coded test video to ``path`` using the ffmpeg CLI.

    The video is encoded losslessly (FFV1 in Matroska). A sine audio track of
    the same duration is added when ``with_audio`` is True.
    """
    num_frames = round(duration_seconds * fps)
    if num_frames - 1 > MAX_FRAME_ID:
        raise ValueError(
            f"Can't encode {num_frames} frame ids on {3 * N} bits. "
            "Try with a shorter duration or a lower fps?"
        )
    ffmpeg = shutil.which("ffmpeg")
    if ffmpeg is None:
        raise RuntimeError("ffmpeg is not available.")

    frames = torch.stack(
        [
            make_frame_data(i, width=width, height=height, channels="RGB")
            for i in range(num_frames)
        ]
    )

    path = Path(path)
    cmd = [
        ffmpeg,
        "-y",
        "-v",
        "error",
        "-f",
        "rawvideo",
        "-pix_fmt",
        "rgb24",
        "-s",
        f"{width}x{height}",
        "-r",
        str(fps),
        "-i",
        "-",
    ]
    if with_audio:
        cmd += ["-f", "lavfi", "-i", f"sine=frequency=440:duration={duration_seconds}"]
    cmd += ["-map", "0:v"]
    if with_audio:
        cmd += ["-map", "1:a", "-c:a", "pcm_s16le"]
    cmd += ["-c:v", "ffv1", "-pix_fmt", "bgr0", str(path)]

    subprocess.run(cmd, input=frames.numpy().tobytes(), check=True)
    return path


def generate_test_image(
    path: Union[str, Path],
    *,
    width: int = EXPECTED_IMAGE_WIDTH,
    height: int = EXPECTED_IMAGE_HEIGHT,
) -> Path:
    path = Path(path)
    Image.new("RGB", (width, height), color=frame_color(0)).save(path)
    return path
