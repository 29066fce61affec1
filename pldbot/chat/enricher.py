"""Keyword-triggered context injection.

Questions about thresholds, amounts or filing obligations get the Art. 17
reference table appended so the model answers with the official figures.
"""

import structlog

from pldbot.chat.prompts import THRESHOLD_REFERENCE

logger = structlog.get_logger(__name__)

THRESHOLD_KEYWORDS = frozenset({
    "umbral", "monto", "límite", "cuánto", "aviso", "reportar",
})

REFERENCE_SEPARATOR = "\n\nContexto de referencia:\n"


def matched_keywords(message: str) -> list[str]:
    """Return the keywords found in the message, sorted for stable logging."""
    lowered = message.lower()
    return sorted(kw for kw in THRESHOLD_KEYWORDS if kw in lowered)


def enrich_message(message: str, reference_block: str = THRESHOLD_REFERENCE) -> str:
    """Append the reference block when the message mentions a threshold keyword.

    Args:
        message: Raw user message.
        reference_block: Reference text to append on a keyword hit.

    Returns:
        The message unchanged, or message + separator + reference block.
    """
    hits = matched_keywords(message)
    if not hits:
        return message

    logger.debug("enricher.reference_added", keywords=hits)
    return f"{message}{REFERENCE_SEPARATOR}{reference_block}"
