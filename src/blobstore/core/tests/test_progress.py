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
Unit tests for the progress module.
"""

import io
import threading
import unittest
from typing import List, Tuple
from unittest import mock

from blobstore.core import progress


class _Recorder:
    """
    Records every progress call.
    """

    def __init__(self):
        self.calls: List[Tuple[int, int]] = []
        self.lock = threading.Lock()

    def __call__(self, bytes_so_far: int, total_bytes: int):
        with self.lock:
            self.calls.append((bytes_so_far, total_bytes))


class TestProgressTracker(unittest.TestCase):
    """
    Tests the progress tracker.
    """

    def test_reports_running_total_and_completes(self):
        """
        Test that every chunk is reported and the final call reports the total.
        """
        recorder = _Recorder()
        tracker = progress.ProgressTracker(1024, recorder)

        for _ in range(4):
            tracker.advance(256)
        tracker.complete()

        self.assertEqual(
            recorder.calls,
            [(256, 1024), (512, 1024), (768, 1024), (1024, 1024)],
        )

    def test_complete_reports_total_when_chunks_fall_short(self):
        """
        Test that completing a transfer reports the total even if fewer bytes were counted.
        """
        recorder = _Recorder()
        tracker = progress.ProgressTracker(1024, recorder)

        tracker.advance(1000)
        tracker.complete()

        self.assertEqual(recorder.calls, [(1000, 1024), (1024, 1024)])

    def test_negative_delta_is_not_reported(self):
        """
        Test that a rewind (negative delta) never produces a decreasing count.
        """
        recorder = _Recorder()
        tracker = progress.ProgressTracker(100, recorder)

        tracker.advance(60)
        tracker.advance(-40)
        tracker.advance(30)
        tracker.advance(40)

        self.assertEqual(recorder.calls, [(60, 100), (90, 100)])
        counts = [count for count, _ in recorder.calls]
        self.assertEqual(counts, sorted(counts))

    def test_count_is_bounded_by_total(self):
        """
        Test that the reported count never exceeds the total.
        """
        recorder = _Recorder()
        tracker = progress.ProgressTracker(10, recorder)

        tracker.advance(8)
        tracker.advance(8)
        tracker.advance(8)
        tracker.complete()

        self.assertEqual(recorder.calls, [(8, 10), (10, 10)])

    def test_empty_transfer_reports_completion(self):
        """
        Test that a zero byte transfer reports (0, 0) once.
        """
        recorder = _Recorder()
        tracker = progress.ProgressTracker(0, recorder)

        tracker.complete()
        tracker.complete()

        self.assertEqual(recorder.calls, [(0, 0)])

    def test_unknown_total_uses_counted_bytes(self):
        """
        Test that a transfer of unknown size reports the counted bytes as the total.
        """
        recorder = _Recorder()
        tracker = progress.ProgressTracker(None, recorder)

        tracker.advance(5)
        tracker.advance(7)
        tracker.complete()

        self.assertEqual(recorder.calls, [(5, 5), (12, 12)])
        self.assertEqual(tracker.total, 12)

    def test_without_callback(self):
        """
        Test that a tracker without a callback still counts.
        """
        tracker = progress.ProgressTracker(10)

        tracker.advance(4)

        self.assertEqual(tracker.reported, 4)

    def test_concurrent_updates_are_monotonic(self):
        """
        Test that updates from several threads produce a non-decreasing sequence ending at
        the total.
        """
        recorder = _Recorder()
        tracker = progress.ProgressTracker(8 * 1000, recorder)

        def _worker():
            for _ in range(1000):
                tracker.advance(1)

        threads = [threading.Thread(target=_worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        tracker.complete()

        counts = [count for count, _ in recorder.calls]
        self.assertEqual(counts, sorted(counts))
        self.assertEqual(recorder.calls[-1], (8000, 8000))


class TestUploadProgressSubscriber(unittest.TestCase):
    """
    Tests the s3transfer progress subscriber.
    """

    def test_on_progress_advances_tracker(self):
        recorder = _Recorder()
        subscriber = progress.UploadProgressSubscriber(progress.ProgressTracker(1024, recorder))

        subscriber.on_progress(future=mock.Mock(), bytes_transferred=512)
        subscriber.on_progress(future=mock.Mock(), bytes_transferred=512)

        self.assertEqual(recorder.calls, [(512, 1024), (1024, 1024)])


class TestProgressWriter(unittest.TestCase):
    """
    Tests the byte counting stream decorator.
    """

    def test_write_counts_bytes_and_passes_data_through(self):
        recorder = _Recorder()
        stream = io.BytesIO()
        writer = progress.ProgressWriter(stream, progress.ProgressTracker(6, recorder))

        writer.write(b'abc')
        writer.write(b'def')
        writer.flush()

        self.assertEqual(stream.getvalue(), b'abcdef')
        self.assertEqual(writer.written, 6)
        self.assertEqual(recorder.calls, [(3, 6), (6, 6)])

    def test_close_closes_wrapped_stream(self):
        stream = io.BytesIO()

        with progress.ProgressWriter(stream, progress.ProgressTracker(0)) as writer:
            self.assertFalse(writer.closed)

        self.assertTrue(stream.closed)


if __name__ == '__main__':
    unittest.main()
