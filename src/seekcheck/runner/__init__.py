# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from ._actions import (  # noqa
    action_end,
    action_fetch_info,
    action_middle,
    action_prefetch,
    action_start,
    ACTION_HANDLERS,
)
from ._oracle import (  # noqa
    check_frame,
    decode_frame_id,
    first_pixel_word,
    playback_time,
    TOLERANCE_SECONDS,
)
from ._scenarios import (  # noqa
    run_all,
    run_image_test,
    run_next_frame_test,
    run_not_available_file_test,
)
from ._sweep import (  # noqa
    configure_subject,
    run_combination,
    run_tests_all_combinations,
)
