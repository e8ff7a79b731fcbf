# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

# Note: Frame and Variant are imported first, the subpackages depend on them.
from ._frame import Frame, MediaInfo  # usort:skip # noqa
from ._variant import AUDIO_VARIANTS, Variant, VIDEO_VARIANTS  # usort:skip # noqa
from ._errors import SeekcheckError, SubjectError, VerificationError  # noqa
from ._assets import frame_color, generate_test_image, generate_test_video  # noqa
from . import combinations, runner, subjects  # noqa

try:
    # Note that version.py is generated during install.
    from .version import __version__  # noqa: F401
except Exception:
    pass
