# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import abc
import logging
import math
import numbers
import os
import warnings
from pathlib import Path
from typing import Any, Callable, Optional, Union

from seekcheck._constants import IMAGE_EXTENSIONS
from seekcheck._errors import SubjectError
from seekcheck._frame import Frame, MediaInfo

logger = logging.getLogger(__name__)

LogCallback = Callable[[Any, int, str], None]
Source = Union[str, Path]

SELECT_VIDEO = "video"
SELECT_AUDIO = "audio"

_DEFAULT_OPTIONS = {
    "auto_hwaccel": True,
    "skip": 0.0,
    "trim_duration": -1.0,
    "avselect": SELECT_VIDEO,
}


def is_image_path(source: Source) -> bool:
    return os.path.splitext(str(source))[1].lower() in IMAGE_EXTENSIONS


def _validate_option(name: str, value: Any) -> Any:
    if name == "auto_hwaccel":
        return bool(value)
    if name in ("skip", "trim_duration"):
        if not isinstance(value, numbers.Real):
            raise TypeError(f"Option {name} must be a number, got {type(value)}.")
        value = float(value)
        if name == "skip" and value < 0:
            raise ValueError(f"Option skip ({value}) must be >= 0.")
        if name == "trim_duration" and value <= 0 and value != -1:
            raise ValueError(
                f"Option trim_duration ({value}) must be > 0, or -1 to disable it."
            )
        return value
    if name == "avselect":
        allowed = (SELECT_VIDEO, SELECT_AUDIO)
        if value not in allowed:
            raise ValueError(
                f"Invalid avselect ({value}). Supported values are {', '.join(allowed)}."
            )
        return value
    raise ValueError(
        f"Invalid option ({name}). Supported values are {', '.join(_DEFAULT_OPTIONS)}."
    )


class Subject(abc.ABC):
    """A player-like media decoding component under test.

    Requesting a frame at time ``t`` returns the frame played at
    ``skip + clamp(t, 0, trim_duration)`` in the media, the last frame when
    that time is past the end. A request resolving to the frame that was
    returned last gives ``None``, as does a negative ``t``, which only starts
    prefetching. ``get_next_frame()`` walks the media from the frame returned
    last (from the first frame at ``skip`` if none), and gives ``None`` once
    past the end or the trimmed duration, after which the walk restarts.

    Subclasses decode the media: they implement ``_open()``, ``_info()``,
    ``_decode_frame_at()`` and ``_decode_frame_after()``, and may override
    ``_close()``.

    Args:
        source (str or ``Pathlib.path``): The media to play.
    """

    def __init__(self, source: Source):
        self.source = source
        self._options = dict(_DEFAULT_OPTIONS)
        self._opened = False
        self._closed = False
        self._log_context: Any = None
        self._log_callback: Optional[LogCallback] = None
        self._last_frame: Optional[Frame] = None
        self._num_outstanding_frames = 0

    # Decoding hooks

    @abc.abstractmethod
    def _open(self) -> None:
        """Open the media. Raise ``SubjectError`` if it can't be played."""

    @abc.abstractmethod
    def _info(self) -> MediaInfo:
        """Return the info of the opened media, skip and trim not applied."""

    @abc.abstractmethod
    def _decode_frame_at(self, media_seconds: float) -> Optional[Frame]:
        """Return the frame played at ``media_seconds``, the last frame if
        it's past the end, or ``None`` if the media has no frame."""

    @abc.abstractmethod
    def _decode_frame_after(self, frame: Frame) -> Optional[Frame]:
        """Return the frame following ``frame``, or ``None`` at the end."""

    def _close(self) -> None:
        pass

    # Options and logging

    def set_option(self, name: str, value: Any) -> None:
        if self._opened:
            raise SubjectError(
                f"Can't set option {name}: the media is already opened."
            )
        self._options[name] = _validate_option(name, value)

    def get_option(self, name: str) -> Any:
        return self._options[name]

    @property
    def skip(self) -> float:
        return self._options["skip"]

    @property
    def trim_duration(self) -> float:
        trim_duration = self._options["trim_duration"]
        return math.inf if trim_duration < 0 else trim_duration

    @property
    def audio_selected(self) -> bool:
        return self._options["avselect"] == SELECT_AUDIO

    def set_log_sink(self, context: Any, callback: LogCallback) -> None:
        """Route the messages of this subject to ``callback(context, level, message)``."""
        self._log_context = context
        self._log_callback = callback

    def _log(self, level: int, message: str) -> None:
        if self._log_callback is not None:
            self._log_callback(self._log_context, level, message)
        else:
            logger.log(level, message)

    # Playback

    def _ensure_opened(self) -> None:
        if self._closed:
            raise SubjectError("The subject is closed.")
        if not self._opened:
            try:
                self._open()
            except SubjectError as e:
                self._log(logging.ERROR, f"Can not open {self.source}: {e}")
                raise
            self._opened = True

    def _try_open(self) -> bool:
        # Frame requests report open failures through the log sink only, and
        # return no frame.
        if self._closed:
            raise SubjectError("The subject is closed.")
        try:
            self._ensure_opened()
        except SubjectError:
            return False
        return True

    def prefetch(self) -> None:
        """Open the media and start preparing frames.

        Raises:
            SubjectError: if the media can't be opened.
        """
        self._ensure_opened()

    def get_info(self) -> MediaInfo:
        """Return the media info, with the duration reduced by skip and
        trim_duration.

        Raises:
            SubjectError: if the media can't be opened.
        """
        self._ensure_opened()
        info = self._info()
        duration = min(max(info.duration - self.skip, 0.0), self.trim_duration)
        return MediaInfo(width=info.width, height=info.height, duration=duration)

    def get_frame(self, t: float) -> Optional[Frame]:
        if not self._try_open() or t < 0:
            return None

        media_seconds = self.skip + min(t, self.trim_duration)
        frame = self._decode_frame_at(media_seconds)
        if frame is None:
            return None
        if self._last_frame is not None and (
            frame.pts_seconds == self._last_frame.pts_seconds
        ):
            self._log(logging.DEBUG, f"t={t}: same frame as previously, ignoring")
            return None
        return self._deliver(frame)

    def get_next_frame(self) -> Optional[Frame]:
        if not self._try_open():
            return None

        if self._last_frame is None:
            frame = self._decode_frame_at(self.skip)
        else:
            frame = self._decode_frame_after(self._last_frame)
        if frame is None or frame.pts_seconds - self.skip > self.trim_duration:
            self._log(logging.DEBUG, "end of stream reached")
            self._last_frame = None
            return None
        return self._deliver(frame)

    def _deliver(self, frame: Frame) -> Frame:
        self._last_frame = frame
        self._num_outstanding_frames += 1
        return frame

    def release_frame(self, frame: Optional[Frame]) -> None:
        if frame is not None:
            self._num_outstanding_frames -= 1

    @property
    def num_outstanding_frames(self) -> int:
        """Number of frames returned and not released yet."""
        return self._num_outstanding_frames

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._num_outstanding_frames > 0:
            warnings.warn(
                f"{self._num_outstanding_frames} frame(s) of {self.source} "
                "were never released."
            )
        self._close()

    def __enter__(self) -> "Subject":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


SubjectFactory = Callable[[Source], Subject]
