# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import math
from dataclasses import dataclass

from seekcheck._constants import TESTVAL_SKIP, TESTVAL_TRIM_DURATION


@dataclass(frozen=True)
class Variant:
    """The subject options enabled for one full sweep of the combinations."""

    skip: bool = False
    """Start playback ``TESTVAL_SKIP`` seconds into the media."""
    trim_duration: bool = False
    """Stop playback after ``TESTVAL_TRIM_DURATION`` seconds."""
    audio: bool = False
    """Select the audio track instead of the video one."""

    @property
    def skip_seconds(self) -> float:
        return TESTVAL_SKIP if self.skip else 0.0

    @property
    def trim_duration_seconds(self) -> float:
        return TESTVAL_TRIM_DURATION if self.trim_duration else math.inf

    @property
    def name(self) -> str:
        name = "test-audio-" if self.audio else "test-video-"
        if self.skip:
            name += "skip-"
        if self.trim_duration:
            name += "trimdur-"
        return name


VIDEO_VARIANTS = (
    Variant(),
    Variant(skip=True),
    Variant(trim_duration=True),
    Variant(skip=True, trim_duration=True),
)

AUDIO_VARIANTS = tuple(
    Variant(skip=v.skip, trim_duration=v.trim_duration, audio=True)
    for v in VIDEO_VARIANTS
)
