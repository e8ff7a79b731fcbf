import functools
import shutil
from typing import Optional

import pytest

from seekcheck import Frame
from seekcheck._assets import make_frame_data
from seekcheck._constants import SOURCE_FPS
from seekcheck._frame import VIDEO_PIXEL_FORMATS
from seekcheck.subjects import SyntheticSubject


# Decorator for tests that need the ffmpeg CLI and torchcodec. The tests are
# effectively marked to be skipped in pytest_collection_modifyitems() of
# conftest.py
def needs_ffmpeg(test_item):
    return pytest.mark.needs_ffmpeg(test_item)


@functools.lru_cache(maxsize=None)
def real_media_available() -> bool:
    if shutil.which("ffmpeg") is None:
        return False
    try:
        # Importing torchcodec loads the FFmpeg libraries, which may fail even
        # if the package is installed.
        import torchcodec.decoders  # noqa: F401
    except Exception:
        return False
    return True


def make_frame(
    frame_id: int,
    *,
    pts_seconds: Optional[float] = None,
    pix_fmt: str = "bgra",
    width: int = 16,
    height: int = 16,
) -> Frame:
    """Return a frame whose color encodes ``frame_id``. Its timestamp is the one
    of that frame at SOURCE_FPS unless ``pts_seconds`` is passed."""
    if pts_seconds is None:
        pts_seconds = frame_id / SOURCE_FPS
    return Frame(
        data=make_frame_data(
            frame_id,
            width=width,
            height=height,
            channels=VIDEO_PIXEL_FORMATS[pix_fmt],
        ),
        pts_seconds=pts_seconds,
        duration_seconds=1 / SOURCE_FPS,
        pix_fmt=pix_fmt,
    )


class FrameOffsetSubject(SyntheticSubject):
    """Returns the frame ``offset`` frames after the requested one."""

    def __init__(self, source="synthetic", *, offset=2, **kwargs):
        super().__init__(source, **kwargs)
        self._offset = offset

    def _decode_frame_at(self, media_seconds):
        return super()._decode_frame_at(media_seconds + self._offset / SOURCE_FPS)


class MismatchedTimestampSubject(SyntheticSubject):
    """Returns the right pictures with timestamps off by ``offset`` seconds."""

    def __init__(self, source="synthetic", *, offset=0.5, **kwargs):
        super().__init__(source, **kwargs)
        self._offset = offset

    def _make_frame(self, index):
        frame = super()._make_frame(index)
        frame.pts_seconds += self._offset
        return frame


class RepeatingSubject(SyntheticSubject):
    """Returns a frame for every request, even when it was just returned."""

    def get_frame(self, t):
        frame = super().get_frame(t)
        if frame is None and t >= 0 and self._last_frame is not None:
            frame = self._deliver(self._last_frame)
        return frame


class CountingFactory:
    """Subject factory keeping track of the created subjects."""

    def __init__(self, subject_class=SyntheticSubject, **kwargs):
        self._subject_class = subject_class
        self._kwargs = kwargs
        self.subjects = []

    def __call__(self, source):
        subject = self._subject_class(source, **self._kwargs)
        self.subjects.append(subject)
        return subject
