import pytest

from .utils import real_media_available


def pytest_configure(config):
    # register an additional marker (see pytest_collection_modifyitems)
    config.addinivalue_line(
        "markers",
        "needs_ffmpeg: mark for tests that decode real media with torchcodec, "
        "and generate it with the ffmpeg CLI",
    )


def pytest_collection_modifyitems(items):
    # The needs_ffmpeg mark exists if the test was explicitly decorated with
    # @needs_ffmpeg. Those tests are skipped when ffmpeg or a working
    # torchcodec install are missing.
    skip_real_media = not real_media_available()
    for item in items:
        if skip_real_media and item.get_closest_marker("needs_ffmpeg") is not None:
            item.add_marker(
                pytest.mark.skip(reason="ffmpeg or torchcodec not available.")
            )
