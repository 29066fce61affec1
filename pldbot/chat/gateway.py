"""Per-request orchestration of a chat exchange.

validate -> normalize history -> enrich -> model call -> respond, then hand
the exchange to the recorder. Upstream failures are classified; nothing
partial is ever returned.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog
from pydantic import ValidationError

from pldbot.api.schemas import ChatRequest, ChatResponse
from pldbot.chat.enricher import enrich_message
from pldbot.chat.errors import InvalidArgument, Unauthenticated, classify_error
from pldbot.chat.normalizer import normalize_history
from pldbot.core.config import GatewayConfig
from pldbot.core.llm_adapter import ModelAdapter
from pldbot.core.recorder import UsageRecorder

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Principal:
    """Pre-authenticated caller. The id doubles as the usage tenant key."""
    id: str


class ChatGateway:
    """Composes normalizer, enricher, model adapter, classifier and recorder."""

    def __init__(self, config: GatewayConfig, adapter: ModelAdapter, recorder: UsageRecorder):
        self.config = config
        self.adapter = adapter
        self.recorder = recorder

    def handle(self, payload: Mapping[str, Any] | ChatRequest | None, principal: Principal | None) -> ChatResponse:
        """Run one chat exchange.

        Args:
            payload: Raw request body ({message, history?}) or a parsed ChatRequest.
            principal: Authenticated caller, or None.

        Returns:
            ChatResponse with the completion and an ISO-8601 UTC timestamp.

        Raises:
            Unauthenticated: No principal.
            InvalidArgument: Missing, non-string, empty or oversized message.
            ContentRejected | ResourceExhausted | Internal: Classified upstream failure.
        """
        if principal is None or not principal.id:
            raise Unauthenticated()

        request = self._validate(payload)
        logger.info("chat.request", principal_id=principal.id, msg_len=len(request.message),
                    history_len=len(request.history))

        history = normalize_history(request.history)
        enriched = enrich_message(request.message, self.config.reference_block)

        try:
            text = self.adapter.invoke(
                self.config.system_instruction,
                history,
                enriched,
                self.config.generation,
            )
        except Exception as e:
            error = classify_error(e)
            logger.error("chat.upstream_failed", principal_id=principal.id,
                         kind=error.kind, error=str(e))
            raise error from e

        response = ChatResponse(
            response=text,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

        self.recorder.record(principal.id, request.message, text)
        logger.info("chat.response", principal_id=principal.id, chars=len(text),
                    enriched=enriched != request.message)
        return response

    def _validate(self, payload: Mapping[str, Any] | ChatRequest | None) -> ChatRequest:
        if isinstance(payload, ChatRequest):
            request = payload
        else:
            message = payload.get("message") if isinstance(payload, Mapping) else None
            if not isinstance(message, str) or not message:
                raise InvalidArgument("El mensaje es requerido")
            try:
                request = ChatRequest.model_validate(payload)
            except ValidationError as e:
                logger.warning("chat.invalid_request", errors=e.error_count())
                raise InvalidArgument("La solicitud no es válida") from e

        if len(request.message) > self.config.max_message_length:
            raise InvalidArgument(
                f"El mensaje es demasiado largo (máx {self.config.max_message_length} caracteres)"
            )
        return request
