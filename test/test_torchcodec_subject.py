import pytest

from seekcheck import generate_test_image, generate_test_video, SubjectError, Variant
from seekcheck._constants import NOT_AVAILABLE_FILE
from seekcheck.runner import (
    decode_frame_id,
    run_image_test,
    run_next_frame_test,
    run_not_available_file_test,
    run_tests_all_combinations,
)
from seekcheck.subjects import TorchCodecSubject

from .utils import needs_ffmpeg


@pytest.fixture(scope="module")
def media(tmp_path_factory):
    return generate_test_video(tmp_path_factory.mktemp("media") / "media.mkv")


@pytest.fixture(scope="module")
def image(tmp_path_factory):
    return generate_test_image(tmp_path_factory.mktemp("media") / "image.png")


def _open(source):
    subject = TorchCodecSubject(source)
    subject.set_option("auto_hwaccel", False)
    return subject


def test_source_type():
    with pytest.raises(TypeError, match="Unknown source type"):
        TorchCodecSubject(b"media.mkv")


def test_missing_file_is_reported_on_open():
    with TorchCodecSubject(NOT_AVAILABLE_FILE) as subject:
        with pytest.raises(SubjectError, match="No such file"):
            subject.prefetch()
        assert subject.get_frame(1.0) is None


def test_not_available_file_test():
    assert run_not_available_file_test(TorchCodecSubject) >= 1


@needs_ffmpeg
def test_info(media):
    with _open(media) as subject:
        info = subject.get_info()
        assert (info.width, info.height) == (16, 16)
        assert info.duration == pytest.approx(60.0)


@needs_ffmpeg
def test_frames(media):
    with _open(media) as subject:
        frame = subject.get_frame(0)
        assert decode_frame_id(frame) == 0
        assert frame.pix_fmt == "rgb24"
        subject.release_frame(frame)

        frame = subject.get_frame(30.1)
        assert decode_frame_id(frame) == 752
        assert frame.pts_seconds == pytest.approx(30.08)
        subject.release_frame(frame)

        frame = subject.get_next_frame()
        assert decode_frame_id(frame) == 753
        subject.release_frame(frame)

        frame = subject.get_frame(999999.0)
        assert decode_frame_id(frame) == 1499
        subject.release_frame(frame)


@needs_ffmpeg
def test_skip(media):
    with _open(media) as subject:
        subject.set_option("skip", 7.12)
        frame = subject.get_frame(16.0)
        assert decode_frame_id(frame) == 578
        subject.release_frame(frame)
        assert subject.get_frame(16.001) is None


@needs_ffmpeg
@pytest.mark.parametrize(
    "variant", (Variant(), Variant(skip=True, trim_duration=True)), ids=lambda v: v.name
)
def test_all_combinations(media, variant):
    assert run_tests_all_combinations(TorchCodecSubject, media, variant) == 325


@needs_ffmpeg
def test_next_frame_test(media):
    assert run_next_frame_test(TorchCodecSubject, media) == [1500, 1500]


@needs_ffmpeg
def test_image_test(image):
    run_image_test(TorchCodecSubject, image)


@needs_ffmpeg
def test_image_has_no_audio(image):
    with _open(image) as subject:
        subject.set_option("avselect", "audio")
        with pytest.raises(SubjectError, match="no audio track"):
            subject.prefetch()
