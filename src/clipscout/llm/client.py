import os
import logging
from typing import Any, Dict, Optional

import openai
from openai import OpenAI

from clipscout.config import LLMConfig

logger = logging.getLogger(__name__)


class LLMNotConfiguredError(RuntimeError):
    """Raised when no API key is available for the LLM provider."""


class AIQuotaExceededError(RuntimeError):
    """Raised when the LLM provider rejects a call for quota or rate limits."""


def detect_llm_availability() -> bool:
    return bool(os.getenv("OPENAI_API_KEY"))


def get_client(api_key: Optional[str] = None) -> OpenAI:
    api_key = api_key or os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise LLMNotConfiguredError("AI API key not configured")
    return OpenAI(api_key=api_key)


def complete(
    prompt: str,
    cfg: LLMConfig,
    temperature: float,
    system_prompt: Optional[str] = None,
    json_mode: bool = False,
    client: Optional[Any] = None
) -> str:
    """Send a single chat completion and return the message content."""
    client = client or get_client()

    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})

    params: Dict[str, Any] = {
        "model": cfg.model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": cfg.max_tokens,
    }
    if json_mode:
        params["response_format"] = {"type": "json_object"}

    try:
        response = client.chat.completions.create(**params)
    except openai.RateLimitError as e:
        raise AIQuotaExceededError(str(e)) from e
    except openai.OpenAIError as e:
        if "quota" in str(e).lower():
            raise AIQuotaExceededError(str(e)) from e
        raise

    return response.choices[0].message.content or ""
