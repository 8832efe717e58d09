from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Tuple

from .errors import ValidationError


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Direction(str, Enum):
    """Writing direction of a displayed line."""
    LTR = "ltr"
    RTL = "rtl"


class RequestState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


class LessonState(str, Enum):
    NO_CATEGORY = "no_category"
    LOADING = "loading"
    LOADED = "loaded"


# Fixed lesson topics offered by the lesson screen
CATEGORIES: Tuple[str, ...] = ("Grammar", "Vocabulary", "Pronunciation", "Sentence Structure", "Idioms")
ADD_LESSON_KEY = "+"                 # Opens the custom lesson form, never fetched


@dataclass(frozen=True)
class Turn:
    """One message in a conversation. Immutable once created."""
    sender: Sender
    text: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            raise ValidationError("a turn needs non-empty text")

    @property
    def is_user(self) -> bool:
        return self.sender is Sender.USER


@dataclass(frozen=True)
class Completion:
    """
    Successful reply from the completion endpoint.

    `empty` is True when the endpoint answered without any content; `text`
    then holds the "no response" sentinel so callers can tell the two
    success paths apart without treating either as an error.
    """
    text: str
    empty: bool = False


@dataclass(frozen=True)
class DisplayLine:
    """A line of text plus the rendering metadata derived from its script."""
    text: str
    direction: Direction
    align: str                       # "left" or "right"
