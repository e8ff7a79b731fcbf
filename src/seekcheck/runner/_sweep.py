# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import logging

from seekcheck._constants import TESTVAL_SKIP, TESTVAL_TRIM_DURATION
from seekcheck._errors import SeekcheckError
from seekcheck._variant import Variant
from seekcheck.combinations import (
    Action,
    combination_name,
    decode_combination,
    END_OF_COMBINATIONS,
    next_combination,
)
from seekcheck.runner._actions import ACTION_HANDLERS
from seekcheck.subjects import SELECT_AUDIO, Source, Subject, SubjectFactory

logger = logging.getLogger(__name__)


def configure_subject(subject: Subject, variant: Variant) -> None:
    subject.set_option("auto_hwaccel", False)
    if variant.skip:
        subject.set_option("skip", TESTVAL_SKIP)
    if variant.trim_duration:
        subject.set_option("trim_duration", TESTVAL_TRIM_DURATION)
    if variant.audio:
        subject.set_option("avselect", SELECT_AUDIO)


def run_combination(subject: Subject, comb: int, variant: Variant) -> None:
    """Run the actions of ``comb`` in order on ``subject``, stopping at the
    first failure."""
    print(f":: {variant.name}{combination_name(comb)}", flush=True)
    for action in decode_combination(comb):
        ACTION_HANDLERS[Action(action)](subject, variant)


def run_tests_all_combinations(
    subject_factory: SubjectFactory, source: Source, variant: Variant
) -> int:
    """Run every combination of actions on a fresh subject playing ``source``.

    Args:
        subject_factory (callable): Creates a subject from a source.
        source (str or ``Pathlib.path``): The test media.
        variant (Variant): The options to enable on every subject.

    Returns:
        int: The number of combinations that were run.

    Raises:
        SeekcheckError: on the first failing combination. The remaining
            combinations are not run.
    """
    num_combinations = 0
    comb = END_OF_COMBINATIONS
    while (comb := next_combination(comb)) != END_OF_COMBINATIONS:
        with subject_factory(source) as subject:
            configure_subject(subject, variant)
            try:
                run_combination(subject, comb, variant)
            except SeekcheckError:
                logger.error("test failed: %s%s", variant.name, combination_name(comb))
                raise
        num_combinations += 1
    return num_combinations
