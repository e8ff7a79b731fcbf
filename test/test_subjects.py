import logging
import math

import pytest

from seekcheck import SubjectError
from seekcheck._constants import NOT_AVAILABLE_FILE, TESTVAL_SKIP
from seekcheck.runner import decode_frame_id
from seekcheck.subjects import is_image_path, SyntheticSubject


@pytest.fixture
def subject():
    with SyntheticSubject() as s:
        yield s


def _frame_id(frame):
    return decode_frame_id(frame)


class TestOptions:
    def test_defaults(self, subject):
        assert subject.get_option("auto_hwaccel") is True
        assert subject.skip == 0
        assert subject.trim_duration == math.inf
        assert not subject.audio_selected

    def test_set_options(self, subject):
        subject.set_option("auto_hwaccel", 0)
        subject.set_option("skip", 7)
        subject.set_option("trim_duration", 53.43)
        subject.set_option("avselect", "audio")
        assert subject.get_option("auto_hwaccel") is False
        assert subject.skip == 7.0
        assert subject.trim_duration == 53.43
        assert subject.audio_selected

        subject.set_option("trim_duration", -1)
        assert subject.trim_duration == math.inf

    def test_invalid_options(self, subject):
        with pytest.raises(ValueError, match="Invalid option"):
            subject.set_option("speed", 2)
        with pytest.raises(ValueError, match="Invalid avselect"):
            subject.set_option("avselect", "subtitles")
        with pytest.raises(ValueError, match="skip"):
            subject.set_option("skip", -1.0)
        with pytest.raises(ValueError, match="trim_duration"):
            subject.set_option("trim_duration", 0)
        with pytest.raises(TypeError, match="must be a number"):
            subject.set_option("skip", "7")

    def test_options_are_frozen_once_opened(self, subject):
        subject.prefetch()
        with pytest.raises(SubjectError, match="already opened"):
            subject.set_option("skip", 1.0)


class TestGetFrame:
    def test_frame_at_time(self, subject):
        frame = subject.get_frame(30.1)
        assert _frame_id(frame) == 752
        assert frame.pts_seconds == pytest.approx(30.08)
        assert (frame.width, frame.height) == (16, 16)
        assert frame.pix_fmt == "bgra"

    def test_same_frame_is_not_returned_twice(self, subject):
        assert _frame_id(subject.get_frame(16.0)) == 400
        assert subject.get_frame(16.001) is None
        assert subject.get_frame(16.039) is None
        assert _frame_id(subject.get_frame(16.04)) == 401

    def test_negative_time_only_prefetches(self, subject):
        assert subject.get_frame(-1) is None
        assert _frame_id(subject.get_frame(0)) == 0

    def test_past_the_end(self, subject):
        last = subject.get_frame(999999.0)
        assert _frame_id(last) == 1499
        # Still past the end: that's the same frame
        assert subject.get_frame(99999.0) is None

    def test_skip(self, subject):
        subject.set_option("skip", TESTVAL_SKIP)
        frame = subject.get_frame(16.0)
        assert _frame_id(frame) == 578
        assert frame.pts_seconds == pytest.approx(23.12)
        assert subject.get_frame(16.001) is None

    def test_trim_duration(self, subject):
        subject.set_option("trim_duration", 10.0)
        assert _frame_id(subject.get_frame(30.0)) == 250
        assert subject.get_frame(40.0) is None

    def test_pixel_format(self):
        with SyntheticSubject(pix_fmt="rgb24") as subject:
            frame = subject.get_frame(1.0)
            assert frame.pix_fmt == "rgb24"
            assert _frame_id(frame) == 25

    def test_invalid_pixel_format(self):
        with pytest.raises(ValueError, match="Invalid pixel format"):
            SyntheticSubject(pix_fmt="nv12")


class TestGetNextFrame:
    def test_walk_from_start(self, subject):
        ids = [_frame_id(subject.get_next_frame()) for _ in range(3)]
        assert ids == [0, 1, 2]

    def test_walk_after_seek(self, subject):
        subject.get_frame(15.0)
        assert subject.get_next_frame().pts_seconds == pytest.approx(15.04)
        assert subject.get_next_frame().pts_seconds == pytest.approx(15.08)

    def test_walk_with_skip_starts_at_skip(self, subject):
        subject.set_option("skip", TESTVAL_SKIP)
        assert subject.get_next_frame().pts_seconds == pytest.approx(TESTVAL_SKIP)

    def test_walk_ends_and_restarts(self):
        with SyntheticSubject(duration_seconds=1.0) as subject:
            frames = []
            while (frame := subject.get_next_frame()) is not None:
                frames.append(frame)
            assert len(frames) == 25
            assert _frame_id(subject.get_next_frame()) == 0

    def test_walk_stops_at_trim_duration(self, subject):
        subject.set_option("trim_duration", 1.02)
        num_frames = 0
        while subject.get_next_frame() is not None:
            num_frames += 1
        # Frames at 0, 0.04, ..., 1.0
        assert num_frames == 26


class TestInfo:
    def test_info(self, subject):
        info = subject.get_info()
        assert (info.width, info.height) == (16, 16)
        assert info.duration == 60.0

    def test_info_with_skip_and_trim(self, subject):
        subject.set_option("skip", 7.0)
        subject.set_option("trim_duration", 100.0)
        assert subject.get_info().duration == 53.0

    def test_still_image(self):
        with SyntheticSubject.from_path("image.jpg") as subject:
            frame = subject.get_frame(53.0)
            assert (frame.width, frame.height) == (480, 640)
            info = subject.get_info()
            assert (info.width, info.height) == (480, 640)
            assert subject.get_next_frame() is None


class TestAudio:
    def test_audio_frames(self, subject):
        subject.set_option("avselect", "audio")
        frame = subject.get_frame(15.0)
        assert frame.is_audio
        assert frame.data.shape == (2, 1764)
        assert frame.pts_seconds == pytest.approx(15.0)
        assert subject.get_next_frame().pts_seconds == pytest.approx(15.04)

    def test_still_image_has_no_audio(self):
        with SyntheticSubject.from_path("image.png") as subject:
            subject.set_option("avselect", "audio")
            with pytest.raises(SubjectError, match="no audio"):
                subject.prefetch()


class TestUnavailableMedia:
    def test_errors(self):
        with SyntheticSubject.from_path(NOT_AVAILABLE_FILE) as subject:
            with pytest.raises(SubjectError, match="No such file"):
                subject.prefetch()
            with pytest.raises(SubjectError, match="No such file"):
                subject.get_info()
            assert subject.get_frame(1.0) is None
            assert subject.get_next_frame() is None

    def test_log_sink(self):
        messages = []
        context = object()
        with SyntheticSubject.from_path(NOT_AVAILABLE_FILE) as subject:
            subject.set_log_sink(
                context, lambda arg, level, msg: messages.append((arg, level, msg))
            )
            subject.get_frame(3.0)

        assert messages
        for arg, level, msg in messages:
            assert arg is context
            assert level == logging.ERROR
            assert NOT_AVAILABLE_FILE in msg

    def test_default_logging(self, caplog):
        with SyntheticSubject.from_path(NOT_AVAILABLE_FILE) as subject:
            with caplog.at_level(logging.ERROR):
                subject.get_frame(3.0)
        assert "Can not open /i/do/not/exist" in caplog.text


class TestLifecycle:
    def test_release_accounting(self, subject):
        f0 = subject.get_frame(0)
        f1 = subject.get_next_frame()
        assert subject.num_outstanding_frames == 2
        subject.release_frame(f0)
        subject.release_frame(None)
        subject.release_frame(f1)
        assert subject.num_outstanding_frames == 0

    def test_unreleased_frames_warning(self):
        subject = SyntheticSubject()
        subject.get_frame(0)
        with pytest.warns(UserWarning, match="1 frame"):
            subject.close()

    def test_closed_subject(self):
        subject = SyntheticSubject()
        subject.close()
        subject.close()
        with pytest.raises(SubjectError, match="closed"):
            subject.get_frame(0)
        with pytest.raises(SubjectError, match="closed"):
            subject.prefetch()


@pytest.mark.parametrize(
    "path, expected",
    (
        ("image.jpg", True),
        ("IMAGE.PNG", True),
        ("/some/dir/photo.jpeg", True),
        ("media.mkv", False),
        ("noext", False),
    ),
)
def test_is_image_path(path, expected):
    assert is_image_path(path) == expected
