# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import logging
import math
from pathlib import Path
from typing import Optional

import numpy as np
import torch
from PIL import Image

from seekcheck._constants import SOURCE_FPS
from seekcheck._errors import SubjectError
from seekcheck._frame import AUDIO_SAMPLE_FORMAT, Frame, MediaInfo
from seekcheck.subjects._subject import is_image_path, Source, Subject

# Requested times are rounded up to the microsecond before being looked up, so
# that a time computed as skip + t lands on the frame starting at that time
# despite floating point errors.
_SEEK_EPSILON = 1e-6


def _check_source_exists(source: Source) -> None:
    if "://" not in str(source) and not Path(source).exists():
        raise SubjectError(f"{source}: No such file or directory")


class TorchCodecSubject(Subject):
    """A subject decoding media files with TorchCodec.

    Video frames come from :class:`torchcodec.decoders.VideoDecoder` in exact
    seek mode, as NHWC ``rgb24`` frames. When the audio track is selected,
    audio frames of ``audio_frame_seconds`` are cut from the samples of
    :class:`torchcodec.decoders.AudioDecoder`. Still images are loaded with
    Pillow and played as a single frame.

    The media is opened on the first request. Enabling the ``auto_hwaccel``
    option decodes video on CUDA when it is available.

    Args:
        source (str or ``Pathlib.path``): A local path or a URL to the media.
        audio_frame_seconds (float, optional): Duration of the audio frames.
            Default: ``1 / SOURCE_FPS``.
    """

    def __init__(self, source: Source, *, audio_frame_seconds: float = 1 / SOURCE_FPS):
        if not isinstance(source, (str, Path)):
            raise TypeError(
                f"Unknown source type: {type(source)}. Supported types are str and Path."
            )
        super().__init__(source)
        if audio_frame_seconds <= 0:
            raise ValueError(
                f"audio_frame_seconds ({audio_frame_seconds}) must be > 0"
            )
        self._audio_frame_seconds = audio_frame_seconds
        self._image: Optional[Frame] = None
        self._video_decoder = None
        self._audio_decoder = None
        self._audio_duration_seconds = 0.0

    @property
    def device(self) -> str:
        if self.get_option("auto_hwaccel") and torch.cuda.is_available():
            return "cuda"
        return "cpu"

    def _open(self) -> None:
        _check_source_exists(self.source)
        if is_image_path(self.source):
            self._open_image()
        elif self.audio_selected:
            self._open_audio()
        else:
            self._open_video()

    def _open_image(self) -> None:
        if self.audio_selected:
            raise SubjectError(f"{self.source} is an image and has no audio track")
        try:
            with Image.open(self.source) as pil_image:
                data = torch.from_numpy(np.asarray(pil_image.convert("RGB")).copy())
        except OSError as e:
            raise SubjectError(f"Can not load image {self.source}: {e}") from e
        self._image = Frame(
            data=data, pts_seconds=0.0, duration_seconds=0.0, pix_fmt="rgb24"
        )

    def _open_video(self) -> None:
        from torchcodec.decoders import VideoDecoder

        try:
            self._video_decoder = VideoDecoder(
                self.source,
                dimension_order="NHWC",
                seek_mode="exact",
                device=self.device,
            )
        except (RuntimeError, ValueError) as e:
            raise SubjectError(f"Can not decode video of {self.source}: {e}") from e

    def _open_audio(self) -> None:
        from torchcodec.decoders import AudioDecoder

        try:
            self._audio_decoder = AudioDecoder(self.source)
        except (RuntimeError, ValueError) as e:
            raise SubjectError(f"Can not decode audio of {self.source}: {e}") from e

        duration = self._audio_decoder.metadata.duration_seconds_from_header
        if duration is None:
            raise SubjectError(f"The audio duration of {self.source} is unknown.")
        self._audio_duration_seconds = duration

        # The info still reports the picture size when there is one.
        try:
            self._open_video()
        except SubjectError as e:
            self._log(logging.INFO, f"no video info available: {e}")

    def _info(self) -> MediaInfo:
        if self._image is not None:
            return MediaInfo(
                width=self._image.width, height=self._image.height, duration=0.0
            )
        width = height = 0
        duration = self._audio_duration_seconds
        if self._video_decoder is not None:
            metadata = self._video_decoder.metadata
            width, height = metadata.width, metadata.height
            if not self.audio_selected:
                duration = metadata.end_stream_seconds - metadata.begin_stream_seconds
        return MediaInfo(width=width, height=height, duration=duration)

    def _decode_frame_at(self, media_seconds: float) -> Optional[Frame]:
        if self._image is not None:
            return self._image
        if self.audio_selected:
            return self._decode_audio_frame(self._audio_frame_index(media_seconds))
        return self._decode_video_frame(media_seconds)

    def _decode_frame_after(self, frame: Frame) -> Optional[Frame]:
        if self._image is not None:
            return None
        if self.audio_selected:
            index = round(frame.pts_seconds / self._audio_frame_seconds) + 1
            if index > self._last_audio_frame_index:
                return None
            return self._decode_audio_frame(index)

        metadata = self._video_decoder.metadata
        frame_duration = frame.duration_seconds
        if frame_duration <= 0:
            frame_duration = 1 / metadata.average_fps
        next_seconds = frame.pts_seconds + frame_duration
        if next_seconds + _SEEK_EPSILON >= metadata.end_stream_seconds:
            return None
        return self._decode_video_frame(next_seconds)

    def _decode_video_frame(self, media_seconds: float) -> Frame:
        decoder = self._video_decoder
        metadata = decoder.metadata
        seconds = max(media_seconds + _SEEK_EPSILON, metadata.begin_stream_seconds)
        if seconds >= metadata.end_stream_seconds:
            frame = decoder.get_frame_at(len(decoder) - 1)
        else:
            frame = decoder.get_frame_played_at(seconds)
        return Frame(
            data=frame.data,
            pts_seconds=frame.pts_seconds,
            duration_seconds=frame.duration_seconds,
            pix_fmt="rgb24",
        )

    @property
    def _last_audio_frame_index(self) -> int:
        return max(
            math.ceil(self._audio_duration_seconds / self._audio_frame_seconds) - 1, 0
        )

    def _audio_frame_index(self, media_seconds: float) -> int:
        index = math.floor((media_seconds + _SEEK_EPSILON) / self._audio_frame_seconds)
        return min(max(index, 0), self._last_audio_frame_index)

    def _decode_audio_frame(self, index: int) -> Frame:
        start_seconds = index * self._audio_frame_seconds
        stop_seconds = min(
            start_seconds + self._audio_frame_seconds, self._audio_duration_seconds
        )
        samples = self._audio_decoder.get_samples_played_in_range(
            start_seconds, stop_seconds
        )
        return Frame(
            data=samples.data,
            pts_seconds=samples.pts_seconds,
            duration_seconds=samples.duration_seconds,
            pix_fmt=AUDIO_SAMPLE_FORMAT,
        )

    def _close(self) -> None:
        self._video_decoder = None
        self._audio_decoder = None
        self._image = None
