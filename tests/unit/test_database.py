"""Unit tests for the log / usage store (SQLite)."""

import pytest

from pldbot.core.database import (
    BOT_RESPONSE_MAX_CHARS,
    USER_MESSAGE_MAX_CHARS,
    append_chat_log,
    get_chat_logs,
    get_chat_usage,
    increment_chat_usage,
    init_db,
)


@pytest.fixture(autouse=True)
def setup_db():
    """Create a fresh in-memory database for each test."""
    init_db("sqlite:///:memory:")
    yield


class TestChatLogs:

    def test_append_and_read(self):
        append_chat_log("t1", "pregunta", "respuesta")
        logs = get_chat_logs("t1")
        assert len(logs) == 1
        assert logs[0].user_message == "pregunta"
        assert logs[0].bot_response == "respuesta"
        assert logs[0].timestamp is not None

    def test_truncation(self):
        append_chat_log("t1", "u" * 800, "b" * 3000)
        log = get_chat_logs("t1")[0]
        assert len(log.user_message) == USER_MESSAGE_MAX_CHARS == 500
        assert len(log.bot_response) == BOT_RESPONSE_MAX_CHARS == 1000

    def test_append_only(self):
        append_chat_log("t1", "uno", "a")
        append_chat_log("t1", "dos", "b")
        assert [log.user_message for log in get_chat_logs("t1")] == ["uno", "dos"]

    def test_principals_isolated(self):
        append_chat_log("t1", "a", "a")
        append_chat_log("t2", "b", "b")
        assert len(get_chat_logs("t1")) == 1
        assert len(get_chat_logs("t2")) == 1


class TestChatUsage:

    def test_unknown_tenant_is_zero(self):
        usage = get_chat_usage("nobody")
        assert usage.total_messages == 0
        assert usage.last_used is None

    def test_first_use_creates_counter(self):
        increment_chat_usage("t1")
        usage = get_chat_usage("t1")
        assert usage.total_messages == 1
        assert usage.last_used is not None
        assert usage.updated_at is not None

    def test_increments_in_place(self):
        for _ in range(3):
            increment_chat_usage("t1")
        assert get_chat_usage("t1").total_messages == 3

    def test_tenants_isolated(self):
        increment_chat_usage("t1")
        increment_chat_usage("t1")
        increment_chat_usage("t2")
        assert get_chat_usage("t1").total_messages == 2
        assert get_chat_usage("t2").total_messages == 1
