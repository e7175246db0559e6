"""Model client — the configured Gemini capability injected into HdlGenerator."""

import logging
import os
from typing import Protocol

from langchain_google_genai import ChatGoogleGenerativeAI

from rtlforge.config import get_config
from rtlforge.errors import ConfigurationError

log = logging.getLogger(__name__)

API_KEY_ENV_VARS = ("GOOGLE_API_KEY", "GEMINI_API_KEY", "API_KEY")
DEFAULT_MODEL = "gemini-2.5-flash"


class ModelClient(Protocol):
    def invoke(
        self,
        prompt: str,
        *,
        response_schema: dict | None = None,
        thinking_budget: int | None = None,
    ) -> str: ...


def _message_text(content) -> str:
    """Flatten an AIMessage content payload (str or list of parts) to text."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type", "text") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class GeminiClient:
    """Single-shot Gemini calls, one ChatGoogleGenerativeAI per request.

    A schema switches the call to JSON mode. ``thinking_budget=0`` disables
    extended reasoning; ``None`` leaves the model default.
    """

    def __init__(self, api_key: str, model_name: str = DEFAULT_MODEL, temperature: float | None = None):
        if not api_key:
            raise ConfigurationError("A Gemini API key is required.")
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature

    @classmethod
    def from_config(cls) -> "GeminiClient":
        """Build a client from config.yaml and the environment.

        Raises ConfigurationError when no API key is set.
        """
        config = get_config()
        api_key = next((os.environ[v] for v in API_KEY_ENV_VARS if os.environ.get(v)), None)
        if not api_key:
            raise ConfigurationError(
                f"API key not set. Define one of {', '.join(API_KEY_ENV_VARS)} in the environment or .env."
            )
        return cls(
            api_key,
            model_name=config.get("model", DEFAULT_MODEL),
            temperature=config.get("temperature"),
        )

    def _build_llm(self, response_schema: dict | None, thinking_budget: int | None) -> ChatGoogleGenerativeAI:
        kwargs = {"model": self.model_name, "google_api_key": self.api_key}
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature
        if response_schema is not None:
            kwargs["response_mime_type"] = "application/json"
            kwargs["response_schema"] = response_schema
        if thinking_budget is not None:
            kwargs["thinking_budget"] = thinking_budget
        return ChatGoogleGenerativeAI(**kwargs)

    def invoke(
        self,
        prompt: str,
        *,
        response_schema: dict | None = None,
        thinking_budget: int | None = None,
    ) -> str:
        llm = self._build_llm(response_schema, thinking_budget)
        log.info(
            "Calling %s (json=%s, thinking_budget=%s)",
            self.model_name, response_schema is not None, thinking_budget,
        )
        response = llm.invoke([{"role": "user", "content": prompt}])
        return _message_text(response.content)
