# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import dataclasses
from dataclasses import dataclass
from typing import Iterable, Iterator, Union

import torch
from torch import Tensor

# Packed pixel formats, as the order of the channels in memory.
VIDEO_PIXEL_FORMATS = {
    "bgra": "BGRA",
    "rgba": "RGBA",
    "argb": "ARGB",
    "abgr": "ABGR",
    "rgb24": "RGB",
}
AUDIO_SAMPLE_FORMAT = "fltp"


def _frame_repr(self):
    # Prints the shape of the .data tensor rather than the (potentially very
    # long) data tensor itself.
    s = self.__class__.__name__ + ":\n"
    spaces = "  "
    for field in dataclasses.fields(self):
        field_name = field.name
        field_val = getattr(self, field_name)
        if field_name == "data":
            field_name = "data (shape)"
            field_val = field_val.shape
        s += f"{spaces}{field_name}: {field_val}\n"
    return s


@dataclass
class Frame(Iterable):
    """A single frame returned by a subject, with associated metadata.

    Video frames hold packed pixels as a 3-D ``(height, width, channels)``
    uint8 tensor whose channel order is given by ``pix_fmt``. Audio frames hold
    a 2-D ``(num_channels, num_samples)`` float tensor and have ``pix_fmt``
    set to ``"fltp"``.
    """

    data: Tensor
    """The frame data (``torch.Tensor``)."""
    pts_seconds: float
    """The timestamp of the frame in the media, in seconds (float)."""
    duration_seconds: float
    """The duration of the frame, in seconds (float)."""
    pix_fmt: str = "bgra"
    """The pixel format tag: one of ``VIDEO_PIXEL_FORMATS`` or ``"fltp"``."""

    def __post_init__(self):
        if self.pix_fmt == AUDIO_SAMPLE_FORMAT:
            if not self.data.ndim == 2:
                raise ValueError(
                    f"audio data must be 2-dimensional, got {self.data.shape = }"
                )
        elif self.pix_fmt in VIDEO_PIXEL_FORMATS:
            if not self.data.ndim == 3:
                raise ValueError(
                    f"data must be 3-dimensional, got {self.data.shape = }"
                )
            num_channels = len(VIDEO_PIXEL_FORMATS[self.pix_fmt])
            if self.data.shape[-1] != num_channels:
                raise ValueError(
                    f"{self.pix_fmt} data must have {num_channels} channels "
                    f"in its last dimension, got {self.data.shape = }"
                )
            if self.data.dtype != torch.uint8:
                raise ValueError(f"data must be uint8, got {self.data.dtype = }")
        else:
            raise ValueError(
                f"Invalid pixel format ({self.pix_fmt}). Supported values are "
                f"{', '.join([*VIDEO_PIXEL_FORMATS, AUDIO_SAMPLE_FORMAT])}."
            )
        self.pts_seconds = float(self.pts_seconds)
        self.duration_seconds = float(self.duration_seconds)

    @property
    def is_audio(self) -> bool:
        return self.pix_fmt == AUDIO_SAMPLE_FORMAT

    @property
    def width(self) -> int:
        return 0 if self.is_audio else self.data.shape[1]

    @property
    def height(self) -> int:
        return 0 if self.is_audio else self.data.shape[0]

    @property
    def linesize(self) -> int:
        """Number of bytes between two consecutive lines of pixels."""
        if self.is_audio:
            return self.data.shape[-1] * self.data.element_size()
        return self.data.stride(0) * self.data.element_size()

    def __iter__(self) -> Iterator[Union[Tensor, float, str]]:
        for field in dataclasses.fields(self):
            yield getattr(self, field.name)

    def __repr__(self):
        return _frame_repr(self)


@dataclass
class MediaInfo:
    """Information about the media opened by a subject."""

    width: int
    height: int
    duration: float
    """Playable duration in seconds, after skip and trim_duration are applied."""
