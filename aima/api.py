"""
OpenAI-backed completion client for the Aima content engine.

One call to `complete()` sends exactly one chat completion request made of
two messages (system role + user text) and returns the reply text. The
client is stateless and safe to share between sessions; it never retries,
so a failed attempt surfaces directly to the calling session.
"""

from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from .config import Settings
from .errors import NetworkFailure, ServiceError, ValidationError
from .logger import logger, Timer
from .models import Completion

NO_RESPONSE = "no response"

ENDPOINT = "chat.completions.create"


def build_messages(system_role: str, user_text: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": system_role},
        {"role": "user", "content": user_text},
    ]


def _upstream_message(exc: "openai.APIStatusError") -> str:
    """Pull error.message out of the error envelope when the service sent one."""
    body = exc.body
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and inner.get("message"):
            return str(inner["message"])
    return exc.message


def _first_choice_text(completion: Any) -> Optional[str]:
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content if content and content.strip() else None


class CompletionClient:
    """
    Thin async wrapper over `AsyncOpenAI.chat.completions.create`.

    Raises NetworkFailure for transport problems (DNS, timeout, reset) and
    ServiceError for non-success responses or when no API key is configured.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        self.model = model
        self.timeout = timeout
        if client is not None:
            self._client = client
        elif api_key:
            # The SDK retries twice by default; this client must not retry.
            self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
            logger.api(f"AsyncOpenAI client initialized (model: {model}, timeout: {timeout}s)")
        else:
            logger.warning("OpenAI client not available, completions will fail until a key is configured")
            self._client = None

    @classmethod
    def from_settings(cls, settings: Settings, lesson: bool = False) -> "CompletionClient":
        api_key = settings.lesson_api_key if lesson else settings.api_key
        return cls(
            api_key=api_key,
            model=settings.chat_model,
            timeout=settings.request_timeout,
            base_url=settings.base_url,
        )

    @property
    def is_available(self) -> bool:
        return self._client is not None

    async def complete(
        self,
        system_role: str,
        user_text: str,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> Completion:
        """
        Send one completion request and return the first choice's text.

        A reply without content is not an error: it comes back as
        Completion(NO_RESPONSE, empty=True).
        """
        if not user_text or not user_text.strip():
            raise ValidationError("user text must not be empty")
        if self._client is None:
            raise ServiceError("API key not configured")

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": build_messages(system_role, user_text),
        }
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        deadline = timeout if timeout is not None else self.timeout
        if deadline is not None:
            kwargs["timeout"] = deadline

        logger.api_call(ENDPOINT, model=self.model)
        try:
            with Timer() as timer:
                completion = await self._client.chat.completions.create(**kwargs)
        except openai.APIConnectionError as e:
            # Also covers APITimeoutError
            logger.api_error(f"Network failure: {e}")
            raise NetworkFailure(str(e) or "Connection error.") from e
        except openai.APIStatusError as e:
            message = _upstream_message(e)
            logger.api_error(f"Service error {e.status_code}: {message}")
            raise ServiceError(message, status_code=e.status_code) from e
        except openai.APIError as e:
            logger.api_error(f"Service error: {e.message}")
            raise ServiceError(e.message) from e
        logger.api_response(ENDPOINT, duration_ms=timer.duration_ms)

        text = _first_choice_text(completion)
        if text is None:
            logger.warning("Completion returned no content")
            return Completion(text=NO_RESPONSE, empty=True)
        return Completion(text=text)
