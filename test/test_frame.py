import pytest
import torch

from seekcheck import Frame, MediaInfo


def test_frame_unpacking():
    data, pts_seconds, duration_seconds, pix_fmt = Frame(  # noqa
        torch.zeros(4, 5, 4, dtype=torch.uint8), 2, 3
    )
    assert isinstance(pts_seconds, float)
    assert isinstance(duration_seconds, float)
    assert pix_fmt == "bgra"


def test_frame_properties():
    frame = Frame(torch.zeros(6, 10, 3, dtype=torch.uint8), 0, 0.04, pix_fmt="rgb24")
    assert frame.width == 10
    assert frame.height == 6
    assert frame.linesize == 30
    assert not frame.is_audio


def test_audio_frame_properties():
    frame = Frame(torch.zeros(2, 1764), 1.0, 0.04, pix_fmt="fltp")
    assert frame.is_audio
    assert frame.width == frame.height == 0
    assert frame.linesize == 1764 * 4


def test_frame_error():
    with pytest.raises(ValueError, match="data must be 3-dimensional"):
        Frame(torch.zeros(4, 4, dtype=torch.uint8), 0, 0)

    with pytest.raises(ValueError, match="must have 4 channels"):
        Frame(torch.zeros(4, 4, 3, dtype=torch.uint8), 0, 0, pix_fmt="bgra")

    with pytest.raises(ValueError, match="data must be uint8"):
        Frame(torch.zeros(4, 4, 3), 0, 0, pix_fmt="rgb24")

    with pytest.raises(ValueError, match="audio data must be 2-dimensional"):
        Frame(torch.zeros(1, 2, 3), 0, 0, pix_fmt="fltp")

    with pytest.raises(ValueError, match="Invalid pixel format"):
        Frame(torch.zeros(4, 4, 3, dtype=torch.uint8), 0, 0, pix_fmt="yuv420p")


def test_frame_repr():
    frame = Frame(torch.zeros(16, 16, 4, dtype=torch.uint8), 1.5, 0.04)
    assert "data (shape): torch.Size([16, 16, 4])" in repr(frame)
    assert "pts_seconds: 1.5" in repr(frame)


def test_media_info():
    info = MediaInfo(width=16, height=16, duration=60.0)
    assert (info.width, info.height) == (16, 16)
