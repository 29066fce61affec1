"""Best-effort conversation logging and usage metering.

Writes are handed to a worker pool so the chat response never waits on the
store. In-flight writes are capped; past the cap a write is dropped and
logged rather than queued. Every failure is caught inside the task and only
logged; a logging or metering outage must not break the chat.
"""

import os
import threading
from collections.abc import Callable
from concurrent.futures import Executor, ThreadPoolExecutor

import structlog

from pldbot.core import database

logger = structlog.get_logger(__name__)


class UsageRecorder:
    """Dispatches the log append and the usage upsert as independent tasks."""

    def __init__(
        self,
        append_log: Callable[[str, str, str], None] = database.append_chat_log,
        increment_usage: Callable[[str], None] = database.increment_chat_usage,
        executor: Executor | None = None,
        max_pending: int | None = None,
    ):
        self._append_log = append_log
        self._increment_usage = increment_usage
        self._executor = executor or ThreadPoolExecutor(
            max_workers=int(os.environ.get("RECORDER_MAX_WORKERS", "4")),
            thread_name_prefix="recorder",
        )
        if max_pending is None:
            max_pending = int(os.environ.get("RECORDER_MAX_PENDING", "1000"))
        self._slots = threading.BoundedSemaphore(max_pending)

    def record(self, principal_id: str, user_message: str, bot_response: str) -> None:
        """Fire-and-forget both writes. Never raises."""
        self._dispatch("log", self._save_conversation, principal_id, user_message, bot_response)
        self._dispatch("usage", self._increment, principal_id)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; with wait=True, drain pending writes first."""
        self._executor.shutdown(wait=wait)

    def _dispatch(self, write: str, fn: Callable[..., None], principal_id: str, *args) -> None:
        if not self._slots.acquire(blocking=False):
            logger.warning("recorder.dropped", write=write, principal_id=principal_id)
            return
        try:
            self._executor.submit(self._run, fn, principal_id, *args)
        except Exception as e:
            # Executor already shut down.
            self._slots.release()
            logger.warning("recorder.dispatch_failed", write=write,
                           principal_id=principal_id, error=str(e))

    def _run(self, fn: Callable[..., None], *args) -> None:
        try:
            fn(*args)
        finally:
            self._slots.release()

    def _save_conversation(self, principal_id: str, user_message: str, bot_response: str) -> None:
        try:
            self._append_log(principal_id, user_message, bot_response)
        except Exception as e:
            logger.warning("recorder.log_failed", principal_id=principal_id, error=str(e))

    def _increment(self, principal_id: str) -> None:
        try:
            self._increment_usage(principal_id)
        except Exception as e:
            logger.warning("recorder.usage_failed", principal_id=principal_id, error=str(e))
