"""Gemini chat adapter.

Owns the outbound call contract: a chat session seeded with the system
instruction and prior turns, one new user turn, fixed generation bounds and
an explicit per-call deadline. Exactly one attempt per call; retrying could
bill the provider twice.
"""

import structlog
from google import genai
from google.genai import types

from pldbot.chat.normalizer import ModelTurn
from pldbot.core.config import GatewayConfig, GenerationConfig

logger = structlog.get_logger(__name__)


class UpstreamError(Exception):
    """The model backend failed or returned no usable text."""
    pass


class ModelAdapter:
    """Wraps the google-genai client for single-shot chat completions."""

    def __init__(self, config: GatewayConfig):
        self.config = config
        self._client = None

    def is_healthy(self) -> bool:
        """Check if an API key is configured.

        Returns:
            True if GEMINI_API_KEY was provided.
        """
        return bool(self.config.api_key)

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(
                api_key=self.config.api_key,
                http_options=types.HttpOptions(
                    timeout=int(self.config.generation.timeout_seconds * 1000),
                    retry_options=types.HttpRetryOptions(attempts=1),
                ),
            )
        return self._client

    def invoke(
        self,
        system_instruction: str,
        history: tuple[ModelTurn, ...],
        message: str,
        generation: GenerationConfig | None = None,
    ) -> str:
        """Send one message in a session seeded with the given history.

        Args:
            system_instruction: Persona and rules for the model.
            history: Normalized prior turns, oldest-first.
            message: The (possibly enriched) new user turn.
            generation: Output bounds; defaults to the adapter's config.

        Returns:
            Plain-text completion.

        Raises:
            UpstreamError: On any SDK failure, missing key, or empty/blocked completion.
        """
        generation = generation or self.config.generation
        if not self.config.api_key:
            raise UpstreamError("GEMINI_API_KEY environment variable is not set.")

        logger.debug("llm.invoke", model=self.config.model_name, turns=len(history),
                     timeout=generation.timeout_seconds)

        try:
            chat = self._get_client().chats.create(
                model=self.config.model_name,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    max_output_tokens=generation.max_output_tokens,
                    temperature=generation.temperature,
                ),
                history=[
                    types.Content(role=turn.role, parts=[types.Part(text=turn.content)])
                    for turn in history
                ],
            )
            response = chat.send_message(message)
        except Exception as e:
            logger.error("llm.failed", error=str(e))
            raise UpstreamError(f"Gemini API Error: {e}") from e

        text = response.text
        if not text:
            reason = _blocked_reason(response)
            logger.warning("llm.empty_response", reason=reason)
            raise UpstreamError(f"Gemini returned no text (reason: {reason})")

        logger.debug("llm.ok", chars=len(text))
        return text


def _blocked_reason(response) -> str:
    """Best-effort name of why a completion came back without text."""
    feedback = getattr(response, "prompt_feedback", None)
    block_reason = getattr(feedback, "block_reason", None)
    if block_reason:
        return getattr(block_reason, "name", str(block_reason))

    candidates = getattr(response, "candidates", None) or []
    if candidates:
        finish_reason = getattr(candidates[0], "finish_reason", None)
        if finish_reason:
            return getattr(finish_reason, "name", str(finish_reason))

    return "UNKNOWN"
