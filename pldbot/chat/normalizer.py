"""Reshape client-supplied chat history into the model's turn format."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

MAX_HISTORY_TURNS = 10


@dataclass(frozen=True)
class ModelTurn:
    """One turn in the backend's two-role vocabulary."""
    role: Literal["user", "model"]
    content: str


def _field(turn: Any, name: str) -> Any:
    if isinstance(turn, Mapping):
        return turn.get(name)
    return getattr(turn, name, None)


def normalize_history(history: Iterable[Any] | None) -> tuple[ModelTurn, ...]:
    """Keep the most recent turns and map roles to "user" / "model".

    Earlier turns are dropped silently. Content is passed through untouched.

    Args:
        history: Oldest-first turns (mappings or objects with role/content), or None.

    Returns:
        Read-only tuple of at most MAX_HISTORY_TURNS ModelTurn, oldest-first.
    """
    if not history:
        return ()

    recent = list(history)[-MAX_HISTORY_TURNS:]
    return tuple(
        ModelTurn(
            role="user" if _field(turn, "role") == "user" else "model",
            content=_field(turn, "content"),
        )
        for turn in recent
    )
