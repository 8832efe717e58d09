"""
Runtime configuration for the Aima content engine.

Credentials are expected in a .env file at the project root (or in the
process environment):

    OPENAI_API_KEY=sk-...
    OPENAI_API_KEY_LESSON=sk-...   # optional, falls back to OPENAI_API_KEY

We use python-dotenv + os.getenv so secrets stay out of git.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError
from .logger import logger

DEFAULT_CHAT_MODEL = "gpt-3.5-turbo"
DEFAULT_LESSON_MAX_TOKENS = 1000
DEFAULT_REQUEST_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """Resolved configuration shared by the completion clients."""
    api_key: Optional[str] = None
    lesson_api_key: Optional[str] = None
    base_url: Optional[str] = None
    chat_model: str = DEFAULT_CHAT_MODEL
    lesson_max_tokens: int = DEFAULT_LESSON_MAX_TOKENS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


def mask_key(key: str) -> str:
    """Mask an API key for logging (show first 8 and last 4 chars)."""
    return f"{key[:8]}...{key[-4:]}" if len(key) > 12 else "***"


def _parse_number(name: str, raw: Optional[str], cast, default):
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(dotenv: bool = True) -> Settings:
    """
    Build Settings from the environment.

    Missing API keys are not fatal: the completion client reports itself
    unavailable and every request fails with a ServiceError instead.
    """
    logger.separator("Aima - Configuration")

    if dotenv:
        logger.env("Loading environment variables from .env file...")
        if load_dotenv():
            logger.env_success("dotenv file loaded successfully")
        else:
            logger.warning("No .env file found or file is empty")

    api_key = os.getenv("OPENAI_API_KEY") or None
    lesson_api_key = os.getenv("OPENAI_API_KEY_LESSON") or api_key

    if api_key:
        logger.env_success(f"OPENAI_API_KEY found: {mask_key(api_key)}")
    else:
        logger.env_error("OPENAI_API_KEY not found in environment!")
    if lesson_api_key and lesson_api_key != api_key:
        logger.env_success(f"OPENAI_API_KEY_LESSON found: {mask_key(lesson_api_key)}")

    settings = Settings(
        api_key=api_key,
        lesson_api_key=lesson_api_key,
        base_url=os.getenv("OPENAI_BASE_URL") or None,
        chat_model=os.getenv("AIMA_CHAT_MODEL") or DEFAULT_CHAT_MODEL,
        lesson_max_tokens=_parse_number(
            "AIMA_LESSON_MAX_TOKENS", os.getenv("AIMA_LESSON_MAX_TOKENS"), int, DEFAULT_LESSON_MAX_TOKENS
        ),
        request_timeout=_parse_number(
            "AIMA_REQUEST_TIMEOUT", os.getenv("AIMA_REQUEST_TIMEOUT"), float, DEFAULT_REQUEST_TIMEOUT
        ),
    )
    logger.env(f"Chat model: {settings.chat_model}")
    logger.env(f"Request timeout: {settings.request_timeout}s")
    return settings
