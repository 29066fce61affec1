"""SQLAlchemy persistence for conversation logs and per-tenant usage counters.

Logs are append-only. Usage counters are merge-upserts with an atomic SQL
increment, so concurrent writers for one tenant never lose an update.
"""

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import structlog
from sqlalchemy import Column, DateTime, Integer, String, Text, create_engine, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = structlog.get_logger(__name__)

Base = declarative_base()

USER_MESSAGE_MAX_CHARS = 500
BOT_RESPONSE_MAX_CHARS = 1000


class ChatLog(Base):
    """One logged exchange. Written once, never updated."""
    __tablename__ = "chat_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    principal_id = Column(String, index=True, nullable=False)
    user_message = Column(Text, nullable=False)
    bot_response = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False,
                       default=lambda: datetime.now(timezone.utc))


class ChatUsage(Base):
    """Per-tenant chatbot usage counter."""
    __tablename__ = "chat_usage"

    tenant_id = Column(String, primary_key=True)
    total_messages = Column(Integer, nullable=False, default=0)
    last_used = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


@dataclass
class UsageSnapshot:
    """Read-only copy of a tenant's usage counter."""
    tenant_id: str
    total_messages: int = 0
    last_used: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class ChatLogEntry:
    principal_id: str
    user_message: str
    bot_response: str
    timestamp: datetime


_engine = None
_SessionLocal = None

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def init_db(database_url: str | None = None) -> None:
    """Create engine + tables. Call once at startup.

    Args:
        database_url: SQLAlchemy connection string. Defaults to DATABASE_URL env var.
    """
    global _engine, _SessionLocal

    url = database_url or os.environ.get("DATABASE_URL", "sqlite:///data/pldbot.sqlite")
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        db_path = url.split("///", 1)[-1]
        if db_path and db_path != ":memory:" and url.startswith("sqlite:///"):
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    _engine = create_engine(url, echo=False, connect_args=connect_args)
    _SessionLocal = sessionmaker(bind=_engine)

    Base.metadata.create_all(_engine)
    logger.info("db.initialized", url=url.split("///")[0] + "///***")


def get_session() -> Session:
    """Get a new database session."""
    if _SessionLocal is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _SessionLocal()


def append_chat_log(principal_id: str, user_message: str, bot_response: str) -> None:
    """Append one exchange, truncating both sides to their storage limits.

    Args:
        principal_id: Caller that produced the exchange.
        user_message: Original (not enriched) user message.
        bot_response: Model completion.
    """
    with get_session() as session:
        session.add(ChatLog(
            principal_id=principal_id,
            user_message=user_message[:USER_MESSAGE_MAX_CHARS],
            bot_response=bot_response[:BOT_RESPONSE_MAX_CHARS],
            timestamp=datetime.now(timezone.utc),
        ))
        session.commit()
        logger.debug("db.chat_log_saved", principal_id=principal_id)


def increment_chat_usage(tenant_id: str) -> None:
    """Create-or-increment the tenant's usage counter in a single statement.

    The increment is expressed as `total_messages + 1` inside the upsert, so the
    database applies it atomically with no read-modify-write in Python.

    Args:
        tenant_id: Usage scope (the principal id).
    """
    with get_session() as session:
        dialect = session.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Usage upsert not supported for dialect '{dialect}'")

        now = datetime.now(timezone.utc)
        table = ChatUsage.__table__
        stmt = insert(table).values(
            tenant_id=tenant_id, total_messages=1, last_used=now, updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.tenant_id],
            set_={
                "total_messages": table.c.total_messages + 1,
                "last_used": stmt.excluded.last_used,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        session.execute(stmt)
        session.commit()
        logger.debug("db.usage_incremented", tenant_id=tenant_id)


def get_chat_usage(tenant_id: str) -> UsageSnapshot:
    """Fetch the tenant's counter; a zero snapshot if nothing was recorded yet."""
    with get_session() as session:
        row = session.get(ChatUsage, tenant_id)
        if row is None:
            return UsageSnapshot(tenant_id=tenant_id)
        return UsageSnapshot(
            tenant_id=row.tenant_id,
            total_messages=row.total_messages,
            last_used=row.last_used,
            updated_at=row.updated_at,
        )


def get_chat_logs(principal_id: str) -> list[ChatLogEntry]:
    """Fetch all logged exchanges for a principal, oldest first."""
    with get_session() as session:
        rows = session.scalars(
            select(ChatLog)
            .where(ChatLog.principal_id == principal_id)
            .order_by(ChatLog.id.asc())
        ).all()
        return [
            ChatLogEntry(
                principal_id=r.principal_id,
                user_message=r.user_message,
                bot_response=r.bot_response,
                timestamp=r.timestamp,
            )
            for r in rows
        ]
