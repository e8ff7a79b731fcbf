# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from typing import Iterator

from seekcheck.combinations._codec import (
    _ACTION_MASK,
    BITS_PER_ACTION,
    END_OF_COMBINATIONS,
    get_action,
    NUM_ACTIONS,
)


def _validate_num_actions(num_actions: int) -> None:
    if not 1 <= num_actions <= _ACTION_MASK:
        raise ValueError(
            f"num_actions ({num_actions}) must be in [1, {_ACTION_MASK}] "
            f"to fit in {BITS_PER_ACTION} bits per action."
        )


def has_duplicate(comb: int, num_actions: int = NUM_ACTIONS) -> bool:
    seen = 0
    for position in range(num_actions + 1):
        action = get_action(comb, position)
        if not action:
            break
        if seen & (1 << action):
            return True
        seen |= 1 << action
    return False


def _increment(comb: int, num_actions: int) -> int:
    # Odometer over the actions 1..num_actions, position 0 being the fastest
    # digit. A digit wrapping around goes back to the first action (never to
    # the terminator) and carries into the next position, which grows the
    # combination by one action when that position was empty.
    result = 0
    position = 0
    carry = True
    while carry or get_action(comb, position):
        if position == num_actions:
            return END_OF_COMBINATIONS
        action = get_action(comb, position)
        if carry:
            action += 1
            if action > num_actions:
                action = 1
            else:
                carry = False
        result |= action << (position * BITS_PER_ACTION)
        position += 1
    return result


def next_combination(comb: int, num_actions: int = NUM_ACTIONS) -> int:
    """Return the combination following ``comb`` in canonical order.

    Starting from ``END_OF_COMBINATIONS`` and feeding back each result yields
    every non-empty combination of distinct actions exactly once, shorter
    combinations first, and then ``END_OF_COMBINATIONS``.

    Args:
        comb (int): The previous combination, or ``END_OF_COMBINATIONS`` to
            get the first one.
        num_actions (int, optional): Size of the action alphabet. Default: the
            number of test actions.

    Returns:
        int: The next combination, or ``END_OF_COMBINATIONS`` once all of them
        were enumerated.
    """
    _validate_num_actions(num_actions)
    while True:
        comb = _increment(comb, num_actions)
        if comb == END_OF_COMBINATIONS or not has_duplicate(comb, num_actions):
            return comb


def iter_combinations(num_actions: int = NUM_ACTIONS) -> Iterator[int]:
    comb = END_OF_COMBINATIONS
    while (comb := next_combination(comb, num_actions)) != END_OF_COMBINATIONS:
        yield comb
