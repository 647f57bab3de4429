# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""
Module for reporting transfer progress to a caller supplied callback.

Two transfer styles are bridged to the same ``on_progress(bytes_so_far, total_bytes)``
contract:

- uploads, where s3transfer reports byte deltas as events
  (:py:class:`UploadProgressSubscriber`);
- downloads, where bytes are counted as they are written to the local file
  (:py:class:`ProgressWriter`).
"""

import logging
import threading
from typing import Any, BinaryIO, Callable
from typing_extensions import override

from s3transfer import subscribers


logger = logging.getLogger(__name__)


# Invoked as on_progress(bytes_so_far, total_bytes) on the thread moving the bytes.
ProgressCallback = Callable[[int, int], None]


class ProgressTracker:
    """
    Running byte count of a single transfer.

    The reported count never decreases and never exceeds the total. Negative deltas (which
    s3transfer emits when it rewinds a part to retry it) lower the internal count, but
    nothing is reported until the count climbs past the last reported value.

    This is thread-safe: multipart uploads report from several worker threads.
    """

    def __init__(self, total: int | None, callback: ProgressCallback | None = None):
        """
        :param total: The total number of bytes of the transfer, or None if unknown.
        :param callback: The callback to report progress to. (Optional)
        """
        self._total = total
        self._callback = callback
        self._transferred = 0
        self._reported = -1
        self._lock = threading.Lock()

    @property
    def total(self) -> int | None:
        return self._total

    @property
    def reported(self) -> int:
        """ Returns the last reported byte count, or 0 if nothing was reported yet. """
        return max(self._reported, 0)

    def _bounded(self, amount: int) -> int:
        if self._total is None:
            return max(amount, 0)
        return min(max(amount, 0), self._total)

    def advance(self, amount: int) -> None:
        """
        Adds a byte delta and reports the new count if it increased.
        """
        with self._lock:
            self._transferred += amount
            current = self._bounded(self._transferred)
            if current <= self._reported:
                return
            self._reported = current
            total = self._total if self._total is not None else current
            if self._callback is not None:
                self._callback(current, total)

    def complete(self) -> None:
        """
        Reports the final ``(total, total)`` call of a successful transfer.

        For transfers of an unknown size, the total is the number of bytes counted.
        """
        with self._lock:
            if self._total is None:
                self._total = self._bounded(self._transferred)
            if self._reported == self._total:
                return
            self._reported = self._total
            if self._callback is not None:
                self._callback(self._total, self._total)


class UploadProgressSubscriber(subscribers.BaseSubscriber):
    """
    An s3transfer subscriber that feeds the bytes sent by an upload into a tracker.
    """

    def __init__(self, tracker: ProgressTracker):
        super().__init__()
        self._tracker = tracker

    @override
    def on_progress(self, future, bytes_transferred, **kwargs):
        # pylint: disable=unused-argument
        self._tracker.advance(bytes_transferred)


class ProgressWriter:
    """
    A writable stream decorator that counts every byte written through it.

    Closing the writer closes the wrapped stream.
    """

    def __init__(self, stream: BinaryIO, tracker: ProgressTracker):
        self._stream = stream
        self._tracker = tracker
        self._written = 0

    def __enter__(self) -> 'ProgressWriter':
        return self

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self.close()

    @property
    def written(self) -> int:
        """ Returns the number of bytes written through this writer. """
        return self._written

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def write(self, data: bytes) -> int:
        count = self._stream.write(data)
        if count is None:
            count = len(data)
        self._written += count
        self._tracker.advance(count)
        return count

    def flush(self) -> None:
        self._stream.flush()

    def close(self) -> None:
        self._stream.close()
