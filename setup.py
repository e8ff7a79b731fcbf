# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Build / install instructions:

- use a virtual env (conda or whatever you want)
- install pytorch (https://pytorch.org/get-started/locally/) and a matching
  torchcodec, along with FFmpeg
- pip install -e ".[test]"


Note:
torch and torchcodec are listed as runtime dependencies below, but installing
them with a plain `pip install` gives you the default (CPU) flavour of torch.
If you want a CUDA build, install torch and torchcodec from the right index
*before* installing seekcheck: pip will then keep them as they are.

The ffmpeg executable is only needed to generate the test media with
`seekcheck.generate_test_video()`.
"""

import subprocess
from pathlib import Path

from setuptools import find_packages, setup


_ROOT_DIR = Path(__file__).parent.resolve()


def _write_version_files():
    with open(_ROOT_DIR / "version.txt") as f:
        version = f.readline().strip()
    try:
        sha = (
            subprocess.check_output(["git", "rev-parse", "HEAD"], cwd=str(_ROOT_DIR))
            .decode("ascii")
            .strip()
        )
        version += "+" + sha[:7]
    except Exception:
        print("INFO: Didn't find sha. Is this a git repo?")

    with open(_ROOT_DIR / "src/seekcheck/version.py", "w") as f:
        f.write("# Note that this file is generated during install.\n")
        f.write(f"__version__ = '{version}'\n")
    return version


setup(
    name="seekcheck",
    version=_write_version_files(),
    description=(
        "Exhaustive seek / prefetch / next-frame combination tests for media players"
    ),
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "numpy",
        "Pillow",
        "torch",
        "torchcodec",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["seekcheck = seekcheck._cli:main"],
    },
)
