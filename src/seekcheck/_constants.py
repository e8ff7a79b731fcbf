# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

# Frame rate of the color-coded test media. The oracle tolerance is one period
# of this rate.
SOURCE_FPS = 25

# Values used when the skip / trim_duration options are enabled for a sweep.
TESTVAL_SKIP = 7.12
TESTVAL_TRIM_DURATION = 53.43

# Number of bits of the frame identifier held by each color channel. They sit
# in the high half of the 8-bit channel, so this is also their bit offset.
FRAME_ID_CHANNEL_BITS = 4

EXPECTED_MEDIA_WIDTH = 16
EXPECTED_MEDIA_HEIGHT = 16

EXPECTED_IMAGE_WIDTH = 480
EXPECTED_IMAGE_HEIGHT = 640

NOT_AVAILABLE_FILE = "/i/do/not/exist"

IMAGE_EXTENSIONS = (".bmp", ".gif", ".jpeg", ".jpg", ".png", ".tif", ".tiff", ".webp")
