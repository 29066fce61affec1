"""Process-wide, read-only gateway configuration.

Built once at startup from environment variables and handed to the
model adapter and the gateway. Never mutated after construction.
"""

import os
from dataclasses import dataclass, field

from pldbot.chat.prompts import SYSTEM_INSTRUCTION, THRESHOLD_REFERENCE


@dataclass(frozen=True)
class GenerationConfig:
    """Fixed generation bounds applied to every model call.

    Attributes:
        max_output_tokens: Upper bound on completion size.
        temperature: Sampling temperature.
        timeout_seconds: Per-call deadline for the upstream request.
    """
    max_output_tokens: int = 1000
    temperature: float = 0.7
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class GatewayConfig:
    """Everything the gateway needs that does not change between requests."""
    api_key: str = ""
    model_name: str = "gemini-1.5-flash"
    system_instruction: str = SYSTEM_INSTRUCTION
    reference_block: str = THRESHOLD_REFERENCE
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    max_message_length: int = 2000

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Read overrides from the environment, falling back to defaults."""
        generation = GenerationConfig(
            max_output_tokens=int(os.environ.get("LLM_MAX_TOKENS", "1000")),
            temperature=float(os.environ.get("LLM_TEMPERATURE", "0.7")),
            timeout_seconds=float(os.environ.get("GEMINI_TIMEOUT_SECONDS", "30")),
        )
        return cls(
            api_key=os.environ.get("GEMINI_API_KEY", ""),
            model_name=os.environ.get("GEMINI_MODEL", "gemini-1.5-flash"),
            generation=generation,
        )
