"""
Conversation session: the state behind one chat thread.

Flow of a submit:
1. Append the user turn and go PENDING.
2. Ask the completion client for a tutoring reply.
3. Append the assistant reply (or a fixed apology on failure).
4. Go back to IDLE, whatever happened in between.

Every dispatch takes a sequence token. Only the reply for the most recent
token is applied; replies to superseded or cancelled requests are dropped.
"""

import asyncio
from typing import Callable, List, Optional, Tuple

from .api import CompletionClient
from .errors import CompletionError
from .logger import logger
from .models import RequestState, Sender, Turn
from .prompts import APOLOGY, GREETING, NO_REPLY, TEACHER_CONTEXT


class ConversationSession:
    """Owns the turn history and the in-flight flag for one chat session."""

    def __init__(
        self,
        client: CompletionClient,
        on_change: Optional[Callable[["ConversationSession"], None]] = None,
    ):
        self._client = client
        self._on_change = on_change
        self._history: List[Turn] = [self._greeting()]
        self._state = RequestState.IDLE
        self._sequence = 0
        self._inflight: Optional[asyncio.Future] = None
        self._closed = False

        self.draft = ""                 # Text the user is typing
        self.input_visible = False

    @staticmethod
    def _greeting() -> Turn:
        return Turn(sender=Sender.ASSISTANT, text=GREETING)

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def history(self) -> Tuple[Turn, ...]:
        return tuple(self._history)

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def is_pending(self) -> bool:
        return self._state is RequestState.PENDING

    @property
    def closed(self) -> bool:
        return self._closed

    def show_input(self) -> None:
        self.input_visible = True
        self._notify()

    def hide_input(self) -> None:
        self.input_visible = False
        self._notify()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def submit(self, text: Optional[str] = None) -> bool:
        """
        Send `text` (or the current draft) to the tutor.

        Returns True when a reply turn was appended, False when the input
        was blank, the session is closed, or the request was superseded.
        """
        if self._closed:
            logger.warning("Submit on a closed conversation ignored")
            return False

        text = self.draft if text is None else text
        if not text or not text.strip():
            return False

        self._append(Turn(sender=Sender.USER, text=text))
        self.draft = ""

        self._sequence += 1
        token = self._sequence
        if self.is_pending:
            logger.chat(f"Request #{token} overlaps an in-flight request, older reply will be dropped")
        self._set_state(RequestState.PENDING)

        task = asyncio.ensure_future(self._client.complete(TEACHER_CONTEXT, text))
        self._inflight = task
        try:
            completion = await task
        except asyncio.CancelledError:
            if self._is_stale(token):
                logger.chat(f"Request #{token} cancelled")
                return False
            raise
        except CompletionError as e:
            if self._is_stale(token):
                logger.chat(f"Dropping failure of superseded request #{token}")
                return False
            logger.api_error(f"Chat request #{token} failed: {e.message}")
            self._append(Turn(sender=Sender.ASSISTANT, text=APOLOGY))
            return True
        except Exception as e:
            if self._is_stale(token):
                return False
            logger.error(f"Chat request #{token} crashed: {e}", exc_info=True)
            self._append(Turn(sender=Sender.ASSISTANT, text=APOLOGY))
            return True
        else:
            if self._is_stale(token):
                logger.chat(f"Dropping stale reply for request #{token}")
                return False
            reply = NO_REPLY if completion.empty or not completion.text.strip() else completion.text
            self._append(Turn(sender=Sender.ASSISTANT, text=reply))
            logger.success(f"Reply #{token} appended ({len(reply)} chars)")
            return True
        finally:
            if not self._is_stale(token):
                self._inflight = None
                self._set_state(RequestState.IDLE)

    def reset(self) -> None:
        """Start over: greeting only, empty draft, hidden input, IDLE."""
        self._cancel_inflight()
        self._history = [self._greeting()]
        self.draft = ""
        self.input_visible = False
        self._set_state(RequestState.IDLE, force_notify=True)
        logger.chat("Conversation reset")

    def close(self) -> None:
        """Tear down the session; any outstanding reply becomes a no-op."""
        self._cancel_inflight()
        self._closed = True
        self._state = RequestState.IDLE
        logger.chat("Conversation closed")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_stale(self, token: int) -> bool:
        return token != self._sequence

    def _cancel_inflight(self) -> None:
        # Bumping the sequence makes every outstanding token stale
        self._sequence += 1
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None

    def _append(self, turn: Turn) -> None:
        self._history.append(turn)
        self._notify()

    def _set_state(self, state: RequestState, force_notify: bool = False) -> None:
        if state is not self._state:
            logger.transition(self._state.value, state.value)
            self._state = state
        elif not force_notify:
            return
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
