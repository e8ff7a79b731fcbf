# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from typing import Optional


class SeekcheckError(Exception):
    """Base class of all the errors that abort a test run."""


class SubjectError(SeekcheckError):
    """The subject under test failed to be created, configured or to run an action."""


class VerificationError(SeekcheckError):
    """A frame returned by the subject doesn't match what the test expects.

    The diagnostic fields are ``None`` when the failure isn't about a
    timestamp, e.g. when a frame is present where none was expected.
    """

    def __init__(
        self,
        message: str,
        *,
        requested_time: Optional[float] = None,
        playback_time: Optional[float] = None,
        estimated_time: Optional[float] = None,
        diff: Optional[float] = None,
    ):
        super().__init__(message)
        self.requested_time = requested_time
        self.playback_time = playback_time
        self.estimated_time = estimated_time
        self.diff = diff
