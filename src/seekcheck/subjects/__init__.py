# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from ._subject import (  # noqa
    is_image_path,
    LogCallback,
    SELECT_AUDIO,
    SELECT_VIDEO,
    Source,
    Subject,
    SubjectFactory,
)
from ._synthetic import SyntheticSubject  # noqa
from ._torchcodec import TorchCodecSubject  # noqa
