"""Unit tests for the best-effort usage & log recorder."""

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from unittest.mock import MagicMock

from pldbot.core.database import get_chat_logs, get_chat_usage
from pldbot.core.recorder import UsageRecorder


class TestRecord:

    def test_dispatches_both_writes(self):
        append_log = MagicMock()
        increment = MagicMock()
        recorder = UsageRecorder(append_log, increment)

        recorder.record("t1", "pregunta", "respuesta")
        recorder.shutdown(wait=True)

        append_log.assert_called_once_with("t1", "pregunta", "respuesta")
        increment.assert_called_once_with("t1")

    def test_store_outage_is_swallowed(self):
        append_log = MagicMock(side_effect=Exception("store unavailable"))
        increment = MagicMock(side_effect=Exception("store unavailable"))
        recorder = UsageRecorder(append_log, increment)

        assert recorder.record("t1", "a", "b") is None
        recorder.shutdown(wait=True)

        append_log.assert_called_once()
        increment.assert_called_once()

    def test_log_failure_does_not_block_counter(self):
        append_log = MagicMock(side_effect=Exception("disk full"))
        increment = MagicMock()
        recorder = UsageRecorder(append_log, increment)

        recorder.record("t1", "a", "b")
        recorder.shutdown(wait=True)

        increment.assert_called_once_with("t1")

    def test_record_after_shutdown_does_not_raise(self):
        append_log = MagicMock()
        recorder = UsageRecorder(append_log, MagicMock())
        recorder.shutdown(wait=True)

        recorder.record("t1", "a", "b")

        append_log.assert_not_called()


class TestAgainstStore:

    def test_writes_reach_store(self, sqlite_db):
        recorder = UsageRecorder()
        recorder.record("t1", "pregunta", "respuesta")
        recorder.shutdown(wait=True)

        assert get_chat_usage("t1").total_messages == 1
        assert get_chat_logs("t1")[0].user_message == "pregunta"

    def test_concurrent_increments_not_lost(self, sqlite_db):
        recorder = UsageRecorder(executor=ThreadPoolExecutor(max_workers=8))
        n = 40

        with ThreadPoolExecutor(max_workers=10) as callers:
            for i in range(n):
                callers.submit(recorder.record, "t1", f"q{i}", f"a{i}")
        recorder.shutdown(wait=True)

        assert get_chat_usage("t1").total_messages == n
        assert len(get_chat_logs("t1")) == n


class _InlineExecutor(Executor):
    """Runs each task on the caller's thread."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        future.set_result(fn(*args, **kwargs))
        return future


class TestInFlightCap:

    def test_drops_writes_past_cap(self):
        gate = threading.Event()
        append_log = MagicMock(side_effect=lambda *a: gate.wait(5))
        increment = MagicMock()
        recorder = UsageRecorder(append_log, increment,
                                 executor=ThreadPoolExecutor(max_workers=1), max_pending=2)

        recorder.record("t1", "primera", "a")
        recorder.record("t1", "segunda", "b")
        gate.set()
        recorder.shutdown(wait=True)

        append_log.assert_called_once_with("t1", "primera", "a")
        increment.assert_called_once_with("t1")

    def test_slots_released_after_completion(self):
        append_log = MagicMock()
        increment = MagicMock()
        recorder = UsageRecorder(append_log, increment, executor=_InlineExecutor(), max_pending=2)

        for i in range(5):
            recorder.record("t1", f"q{i}", f"a{i}")

        assert append_log.call_count == 5
        assert increment.call_count == 5

    def test_slots_released_after_failure(self):
        append_log = MagicMock(side_effect=Exception("store unavailable"))
        increment = MagicMock(side_effect=Exception("store unavailable"))
        recorder = UsageRecorder(append_log, increment, executor=_InlineExecutor(), max_pending=2)

        for _ in range(3):
            recorder.record("t1", "a", "b")

        assert append_log.call_count == 3
        assert increment.call_count == 3
