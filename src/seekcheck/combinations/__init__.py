# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from ._codec import (
    Action,
    BITS_PER_ACTION,
    combination_name,
    decode_combination,
    encode_combination,
    END_OF_COMBINATIONS,
    get_action,
    NUM_ACTIONS,
)
from ._generator import has_duplicate, iter_combinations, next_combination
