"""Gateway error taxonomy and upstream error classification.

Upstream failures arrive as free text. They are mapped onto a small, stable
set of kinds by scanning for marker tokens in a fixed priority order:
content-policy markers first, then quota/rate markers, else internal.
"""

import re

import structlog

logger = structlog.get_logger(__name__)


class GatewayError(Exception):
    """Base error surfaced to clients. `message` is safe to show end users."""
    kind = "internal"
    status_code = 500
    default_message = "Error al procesar tu mensaje. Por favor intenta de nuevo."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class Unauthenticated(GatewayError):
    kind = "unauthenticated"
    status_code = 401
    default_message = "Usuario no autenticado"


class InvalidArgument(GatewayError):
    kind = "invalid-argument"
    status_code = 400
    default_message = "El mensaje es requerido"


class ContentRejected(GatewayError):
    kind = "content-rejected"
    status_code = 400
    default_message = (
        "Tu mensaje fue bloqueado por políticas de seguridad. "
        "Por favor reformula tu pregunta."
    )


class ResourceExhausted(GatewayError):
    kind = "resource-exhausted"
    status_code = 429
    default_message = "Se ha alcanzado el límite de consultas. Intenta de nuevo en unos minutos."


class Internal(GatewayError):
    pass


# Evaluated top to bottom; first matching row wins.
_MARKER_TABLE: list[tuple[type[GatewayError], list[re.Pattern]]] = [
    (ContentRejected, [
        re.compile(r"SAFETY"),
        re.compile(r"PROHIBITED_CONTENT"),
        re.compile(r"BLOCKLIST"),
    ]),
    (ResourceExhausted, [
        re.compile(r"quota", re.IGNORECASE),
        re.compile(r"RESOURCE_EXHAUSTED", re.IGNORECASE),
        re.compile(r"\brate\b", re.IGNORECASE),
    ]),
]


def _error_text(error: BaseException) -> str:
    """Flatten an exception and its cause chain into one string."""
    parts = []
    seen = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        parts.append(f"{type(current).__name__}: {current}")
        current = current.__cause__ or current.__context__
    return "\n".join(parts)


def classify_error(error: BaseException) -> GatewayError:
    """Map any upstream failure to a GatewayError.

    Total: never raises, always returns one of ContentRejected,
    ResourceExhausted or Internal (or the error itself if it already is a
    GatewayError).
    """
    if isinstance(error, GatewayError):
        return error

    text = _error_text(error)
    for kind, markers in _MARKER_TABLE:
        if any(marker.search(text) for marker in markers):
            logger.info("classifier.matched", kind=kind.kind)
            return kind()

    return Internal()
