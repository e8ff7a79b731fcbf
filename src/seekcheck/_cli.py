# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import argparse
import logging
from typing import Optional, Sequence

from seekcheck._errors import SeekcheckError
from seekcheck.runner import run_all
from seekcheck.subjects import SubjectFactory, SyntheticSubject, TorchCodecSubject

logger = logging.getLogger("seekcheck")

subject_registry: dict[str, SubjectFactory] = {
    "torchcodec": TorchCodecSubject,
    "synthetic": SyntheticSubject.from_path,
}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="seekcheck",
        description=(
            "Drive a media player through every combination of prefetch, "
            "info, seek and next-frame requests, and check the returned frames."
        ),
    )
    parser.add_argument("media", help="Path to the color-coded test media.")
    parser.add_argument("image", help="Path to the still test image (480x640).")
    parser.add_argument(
        "--subject",
        help="Player implementation to test.",
        choices=sorted(subject_registry.keys()),
        default="torchcodec",
    )
    parser.add_argument(
        "--audio",
        help="Also run the sweeps on the audio track",
        default=False,
        action=argparse.BooleanOptionalAction,
    )
    parser.add_argument(
        "--verbose",
        help="Show verbose output",
        default=False,
        action=argparse.BooleanOptionalAction,
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        run_all(
            subject_registry[args.subject],
            args.media,
            args.image,
            audio=args.audio,
        )
    except SeekcheckError as e:
        logger.error("test failed: %s", e)
        return 1
    return 0
