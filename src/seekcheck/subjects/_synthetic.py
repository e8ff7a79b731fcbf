# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import math
from typing import Optional

import torch

from seekcheck._assets import make_frame_data
from seekcheck._constants import (
    EXPECTED_IMAGE_HEIGHT,
    EXPECTED_IMAGE_WIDTH,
    EXPECTED_MEDIA_HEIGHT,
    EXPECTED_MEDIA_WIDTH,
    NOT_AVAILABLE_FILE,
    SOURCE_FPS,
)
from seekcheck._errors import SubjectError
from seekcheck._frame import AUDIO_SAMPLE_FORMAT, Frame, MediaInfo, VIDEO_PIXEL_FORMATS
from seekcheck.subjects._subject import is_image_path, Source, Subject

# Times are snapped to the frame grid with this tolerance, so that e.g. 23.12 s
# at 25 fps always lands on frame 578.
_GRID_EPSILON = 1e-6


class SyntheticSubject(Subject):
    """A subject playing analytically generated media.

    The video frames are filled with the color encoding their index, as the
    test media produced by :func:`~seekcheck.generate_test_video`. The audio
    track is a sine wave cut in frames of ``1 / fps`` seconds.

    Args:
        source (str or ``Pathlib.path``): Name of the media. Only used in
            messages.
        duration_seconds (float, optional): Duration of the media. Default: 60.
        fps (int, optional): Frame rate of both tracks. Default: 25.
        width (int, optional): Width of the video frames. Default: 16.
        height (int, optional): Height of the video frames. Default: 16.
        pix_fmt (str, optional): Pixel format of the video frames. Default: "bgra".
        still (bool, optional): Play a single still image instead. Default: False.
        available (bool, optional): When False, opening the media fails as for
            a missing file. Default: True.
        sample_rate (int, optional): Sample rate of the audio track. Default: 44100.
    """

    def __init__(
        self,
        source: Source = "synthetic",
        *,
        duration_seconds: float = 60.0,
        fps: int = SOURCE_FPS,
        width: int = EXPECTED_MEDIA_WIDTH,
        height: int = EXPECTED_MEDIA_HEIGHT,
        pix_fmt: str = "bgra",
        still: bool = False,
        available: bool = True,
        sample_rate: int = 44_100,
    ):
        super().__init__(source)
        if pix_fmt not in VIDEO_PIXEL_FORMATS:
            raise ValueError(
                f"Invalid pixel format ({pix_fmt}). "
                f"Supported values are {', '.join(VIDEO_PIXEL_FORMATS)}."
            )
        if duration_seconds <= 0:
            raise ValueError(f"duration_seconds ({duration_seconds}) must be > 0")
        self._fps = fps
        self._width = width
        self._height = height
        self._pix_fmt = pix_fmt
        self._still = still
        self._available = available
        self._sample_rate = sample_rate
        self._duration_seconds = 0.0 if still else duration_seconds
        self._num_frames = 1 if still else math.ceil(duration_seconds * fps)

    @classmethod
    def from_path(cls, source: Source) -> "SyntheticSubject":
        """Create a stand-in for ``source``: a still image for image paths, a
        missing media for the path of the unavailable-file scenario, and the
        color-coded test media otherwise."""
        if str(source) == NOT_AVAILABLE_FILE:
            return cls(source, available=False)
        if is_image_path(source):
            return cls(
                source,
                still=True,
                width=EXPECTED_IMAGE_WIDTH,
                height=EXPECTED_IMAGE_HEIGHT,
            )
        return cls(source)

    def _open(self) -> None:
        if not self._available:
            raise SubjectError(f"{self.source}: No such file or directory")
        if self._still and self.audio_selected:
            raise SubjectError(f"{self.source} has no audio track")

    def _info(self) -> MediaInfo:
        return MediaInfo(
            width=self._width, height=self._height, duration=self._duration_seconds
        )

    def _make_frame(self, index: int) -> Frame:
        duration = 1.0 / self._fps
        if self.audio_selected:
            num_samples = self._sample_rate // self._fps
            t = (torch.arange(num_samples, dtype=torch.float64) + index * num_samples)
            samples = torch.sin(2 * math.pi * 440 * t / self._sample_rate)
            return Frame(
                data=samples.to(torch.float32).expand(2, num_samples).contiguous(),
                pts_seconds=index * duration,
                duration_seconds=duration,
                pix_fmt=AUDIO_SAMPLE_FORMAT,
            )
        return Frame(
            data=make_frame_data(
                index,
                width=self._width,
                height=self._height,
                channels=VIDEO_PIXEL_FORMATS[self._pix_fmt],
            ),
            pts_seconds=index * duration,
            duration_seconds=0.0 if self._still else duration,
            pix_fmt=self._pix_fmt,
        )

    def _decode_frame_at(self, media_seconds: float) -> Optional[Frame]:
        index = math.floor(media_seconds * self._fps + _GRID_EPSILON)
        index = min(max(index, 0), self._num_frames - 1)
        return self._make_frame(index)

    def _decode_frame_after(self, frame: Frame) -> Optional[Frame]:
        index = round(frame.pts_seconds * self._fps) + 1
        if index >= self._num_frames:
            return None
        return self._make_frame(index)
