"""Chat client for an optional OpenAI-compatible language model backend.

The default target is a local Ollama server, which speaks the OpenAI chat
completions protocol under /v1. The client does not retry; callers treat
the backend as an optional accelerator and fall back on any failure.
"""

import os
from typing import Any

from openai import AsyncOpenAI

from ..core.config.loader import is_test_mode
from ..observability.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434/v1"
DEFAULT_MODEL = "gpt-oss:120b-cloud"
DEFAULT_API_KEY_ENV = "OLLAMA_API_KEY"
DEFAULT_TIMEOUT_SECONDS = 20.0

PLACEHOLDER_API_KEY = "your-api-key-here"


class LLMClient:
    """Thin wrapper over AsyncOpenAI chat completions."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """Initialize LLM client.

        Args:
            api_key: Backend API key; without one the client stays unconfigured
            base_url: OpenAI-compatible endpoint
            model: Model name to request
            timeout: Transport timeout in seconds
        """
        self.test_mode = is_test_mode()
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.timeout = timeout

        self.client: AsyncOpenAI | None = None
        if self.is_configured:
            self.client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )

        logger.info(
            "llm_client_initialized",
            model=model,
            base_url=base_url,
            configured=self.is_configured,
            test_mode=self.test_mode,
        )

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "LLMClient":
        """Build a client from the "llm" config section.

        The key is read from the environment variable named by
        llm.api_key_env so secrets never live in YAML.
        """
        llm = config.get("llm", {})
        api_key_env = llm.get("api_key_env", DEFAULT_API_KEY_ENV)
        return cls(
            api_key=os.getenv(api_key_env),
            base_url=llm.get("base_url", DEFAULT_BASE_URL),
            model=llm.get("model", DEFAULT_MODEL),
            timeout=float(llm.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        )

    @property
    def is_configured(self) -> bool:
        if self.test_mode:
            return False
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    async def chat(self, system_prompt: str, user_message: str) -> str:
        """Send one system + user message pair and return the reply text.

        Args:
            system_prompt: Fixed instructions for the model
            user_message: The transcript-bearing user turn

        Returns:
            Reply content (may be empty)

        Raises:
            RuntimeError: If the client is not configured
            OpenAIError: On transport or API failure
        """
        if self.client is None:
            raise RuntimeError("LLM backend is not configured")

        logger.info("llm_chat_request", model=self.model, input_length=len(user_message))

        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            stream=False,
        )

        content = completion.choices[0].message.content if completion.choices else None

        logger.info(
            "llm_chat_response",
            response_id=getattr(completion, "id", None),
            tokens_total=getattr(getattr(completion, "usage", None), "total_tokens", 0),
        )
        return content or ""


def extract_json_object(text: str | None) -> str | None:
    """Return the first balanced {...} object embedded in text.

    Models often wrap JSON in prose or code fences. Braces inside JSON
    strings are ignored while counting depth.

    Args:
        text: Raw model reply

    Returns:
        The JSON object substring, or None when no balanced object exists
    """
    if not text:
        return None

    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        # Unbalanced from this brace; try the next opening brace
        start = text.find("{", start + 1)
    return None
