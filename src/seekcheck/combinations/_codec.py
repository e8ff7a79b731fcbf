# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import enum
from typing import Iterable

BITS_PER_ACTION = 4
_ACTION_MASK = (1 << BITS_PER_ACTION) - 1

# All-zero combination: both the state before the first combination and the
# signal that all combinations were enumerated.
END_OF_COMBINATIONS = 0


class Action(enum.IntEnum):
    NONE = 0  # end of actions
    PREFETCH = 1  # request a prefetch
    FETCH_INFO = 2  # fetch the media info
    START = 3  # request a frame at t=0
    MIDDLE = 4  # request a few frames in the middle
    END = 5  # request the last frame post end

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    Action.NONE: "none",
    Action.PREFETCH: "prefetch",
    Action.FETCH_INFO: "fetchinfo",
    Action.START: "start",
    Action.MIDDLE: "middle",
    Action.END: "end",
}

NUM_ACTIONS = len(Action) - 1


def encode_combination(actions: Iterable[int]) -> int:
    """Pack a sequence of actions into a combination, first action in the
    lowest bits."""
    comb = 0
    for position, action in enumerate(actions):
        comb |= int(action) << (position * BITS_PER_ACTION)
    return comb


def get_action(comb: int, position: int) -> int:
    return comb >> (position * BITS_PER_ACTION) & _ACTION_MASK


def decode_combination(comb: int, max_length: int = NUM_ACTIONS) -> list[int]:
    """Return the actions of a combination, up to the first terminator."""
    actions = []
    for position in range(max_length):
        action = get_action(comb, position)
        if not action:
            break
        actions.append(action)
    return actions


def combination_name(comb: int) -> str:
    return "-".join(Action(action).display_name for action in decode_combination(comb))
