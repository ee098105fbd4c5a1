"""
chat model factory for the OpenRouter generative text service.

OpenRouter exposes an OpenAI-compatible chat api, so the stock
langchain ChatOpenAI client is pointed at its base url.

required environment variables:
- OPENROUTER_API_KEY: your openrouter api key

optional:
- OPENROUTER_MODEL: model slug (default in skitour_scout.config.settings)
- OPENROUTER_BASE_URL: api base url
"""

import os
from typing import Optional

from langchain_openai import ChatOpenAI

from skitour_scout.config import settings

OPENROUTER_API_KEY_ENV = "OPENROUTER_API_KEY"


def is_openrouter_configured() -> bool:
    """check whether an openrouter api key is available in the environment."""
    return bool(os.environ.get(OPENROUTER_API_KEY_ENV, ""))


def get_openrouter_chat_model(
    model: Optional[str] = None,
    temperature: float = 0.0,
    timeout: float = 30.0,
) -> ChatOpenAI:
    """
    create a ChatOpenAI instance talking to openrouter.

    args:
        model: model slug, defaults to OPENROUTER_MODEL
        temperature: sampling temperature
        timeout: request timeout in seconds

    raises:
        ValueError: when OPENROUTER_API_KEY is not set
    """
    api_key = os.environ.get(OPENROUTER_API_KEY_ENV, "")
    if not api_key:
        raise ValueError(f"missing {OPENROUTER_API_KEY_ENV}")

    return ChatOpenAI(
        model=model or settings.OPENROUTER_MODEL,
        api_key=api_key,
        base_url=settings.OPENROUTER_BASE_URL,
        temperature=temperature,
        timeout=timeout,
        max_retries=1,
    )
