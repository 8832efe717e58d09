"""
Lesson session: category selection, caching and lesson display.

- selecting a cached category shows it immediately, without LOADING
- a cache miss fetches, normalizes, caches and shows the lesson
- advanced lessons are always fetched and never cached
- custom lessons are inserted locally, no network involved

Failures raise an alert and leave the displayed lines untouched.
"""

import asyncio
from typing import Callable, List, Optional, Tuple

from .api import CompletionClient
from .cache import CategoryCache
from .errors import CompletionError
from .logger import logger
from .models import ADD_LESSON_KEY, LessonState
from .normalizer import normalize_lesson
from . import prompts

DEFAULT_MAX_TOKENS = 1000

AlertCallback = Callable[[str, str], None]


def _log_alert(title: str, message: str) -> None:
    logger.warning(f"{title}: {message}")


class LessonSession:
    """Owns the active category, the cache and the displayed lines of one lesson screen."""

    def __init__(
        self,
        client: CompletionClient,
        cache: Optional[CategoryCache] = None,
        category: Optional[str] = None,
        on_alert: Optional[AlertCallback] = None,
        on_change: Optional[Callable[["LessonSession"], None]] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        self._client = client
        self.cache = cache if cache is not None else CategoryCache()
        self._on_alert = on_alert or _log_alert
        self._on_change = on_change
        self.max_tokens = max_tokens

        self._category = category or ""
        self._lines: List[str] = []
        self._state = LessonState.NO_CATEGORY
        self._sequence = 0
        self._inflight: Optional[asyncio.Future] = None
        self._closed = False

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def category(self) -> str:
        return self._category

    @property
    def lines(self) -> Tuple[str, ...]:
        return tuple(self._lines)

    @property
    def state(self) -> LessonState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._state is LessonState.LOADING

    @property
    def can_fetch_advanced(self) -> bool:
        return bool(self._lines) and self._category not in ("", ADD_LESSON_KEY)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def open(self) -> bool:
        """Load the category given at construction, if any."""
        if not self._category:
            return False
        return await self.select_category(self._category)

    async def select_category(self, key: str) -> bool:
        """
        Make `key` the active category and show its lesson.

        Returns True when lines were displayed (from cache or network).
        """
        if self._closed:
            return False

        self._category = key
        logger.lesson(f"Category selected: {key}")

        if key == ADD_LESSON_KEY:
            # The custom lesson form replaces the list; nothing to fetch
            self._supersede()
            self._rest()
            return False

        cached = self.cache.get(key)
        if cached is not None:
            logger.lesson(f"Cache hit for '{key}' ({len(cached)} lines)")
            self._supersede()
            self._lines = list(cached)
            self._set_state(LessonState.LOADED, force_notify=True)
            return True

        logger.lesson(f"Cache miss for '{key}', fetching")
        return await self._fetch(
            key,
            prompts.LESSON_ROLE,
            prompts.lesson_prompt(key),
            store=True,
            failure_alert=prompts.LESSON_FETCH_FAILED,
        )

    async def fetch_advanced(self, key: Optional[str] = None) -> bool:
        """Fetch the advanced lesson for `key` (default: active category). Never cached."""
        if self._closed:
            return False
        key = key or self._category
        if not key or key == ADD_LESSON_KEY:
            return False

        self._category = key
        return await self._fetch(
            key,
            prompts.ADVANCED_LESSON_ROLE,
            prompts.advanced_lesson_prompt(key),
            store=False,
            failure_alert=prompts.ADVANCED_FETCH_FAILED,
        )

    def add_custom_lesson(self, title: str, body: str) -> bool:
        """
        Put a user-written lesson at the top of the displayed lines.

        The title becomes the active category. Cache and network are untouched.
        """
        if self._closed:
            return False
        if not body or not body.strip():
            self._on_alert(*prompts.EMPTY_CUSTOM_LESSON)
            return False

        self._supersede()
        self._lines = [body] + self._lines
        self._category = title or body
        self._set_state(LessonState.LOADED, force_notify=True)
        logger.lesson(f"Custom lesson added: {self._category}")
        self._on_alert(*prompts.CUSTOM_LESSON_ADDED)
        return True

    def close(self) -> None:
        """Tear down the session; an outstanding fetch becomes a no-op."""
        self._supersede()
        self._closed = True
        if self._state is LessonState.LOADING:
            self._rest()
        logger.lesson("Lesson session closed")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _fetch(
        self,
        key: str,
        role: str,
        prompt: str,
        store: bool,
        failure_alert: Tuple[str, str],
    ) -> bool:
        self._supersede()
        token = self._sequence
        self._set_state(LessonState.LOADING)

        task = asyncio.ensure_future(self._client.complete(role, prompt, max_tokens=self.max_tokens))
        self._inflight = task
        try:
            completion = await task
        except asyncio.CancelledError:
            if self._is_stale(token):
                logger.lesson(f"Fetch #{token} for '{key}' cancelled")
                return False
            raise
        except CompletionError as e:
            if self._is_stale(token):
                return False
            logger.api_error(f"Lesson fetch for '{key}' failed: {e.message}")
            self._on_alert(*failure_alert)
            return False
        except Exception as e:
            if self._is_stale(token):
                return False
            logger.error(f"Lesson fetch for '{key}' crashed: {e}", exc_info=True)
            self._on_alert(*failure_alert)
            return False
        else:
            if self._is_stale(token):
                logger.lesson(f"Dropping stale lesson for '{key}' (fetch #{token})")
                return False
            lines = normalize_lesson("" if completion.empty else completion.text)
            if store:
                self.cache.put(key, lines)
            self._lines = lines
            logger.success(f"Lesson '{key}' loaded ({len(lines)} lines)")
            return True
        finally:
            if not self._is_stale(token):
                self._inflight = None
                self._rest()

    def _is_stale(self, token: int) -> bool:
        return token != self._sequence

    def _supersede(self) -> None:
        # Any outstanding fetch loses its token and is cancelled
        self._sequence += 1
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None

    def _rest(self) -> None:
        """Leave LOADING for whichever resting state the displayed lines imply."""
        self._set_state(LessonState.LOADED if self._lines else LessonState.NO_CATEGORY, force_notify=True)

    def _set_state(self, state: LessonState, force_notify: bool = False) -> None:
        if state is not self._state:
            logger.transition(self._state.value, state.value)
            self._state = state
        elif not force_notify:
            return
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
