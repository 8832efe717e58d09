"""
Aima - conversation and lesson content engine for an English/Arabic
learning assistant.

Typical wiring:

    from aima import CompletionClient, ConversationSession, LessonSession, load_settings

    settings = load_settings()
    chat = ConversationSession(CompletionClient.from_settings(settings))
    lessons = LessonSession(
        CompletionClient.from_settings(settings, lesson=True),
        max_tokens=settings.lesson_max_tokens,
    )
"""

from .api import CompletionClient, NO_RESPONSE
from .cache import CategoryCache
from .config import Settings, load_settings
from .conversation import ConversationSession
from .errors import (
    AimaError, CompletionError, ConfigurationError, ErrorKind,
    NetworkFailure, ServiceError, ValidationError,
)
from .lesson import LessonSession
from .models import (
    ADD_LESSON_KEY, CATEGORIES, Completion, Direction, DisplayLine,
    LessonState, RequestState, Sender, Turn,
)
from .normalizer import NO_CONTENT, classify_direction, display_lines, format_timestamp, normalize_lesson

__all__ = [
    "ADD_LESSON_KEY", "AimaError", "CATEGORIES", "CategoryCache", "Completion",
    "CompletionClient", "CompletionError", "ConfigurationError", "ConversationSession",
    "Direction", "DisplayLine", "ErrorKind", "LessonSession", "LessonState",
    "NO_CONTENT", "NO_RESPONSE", "NetworkFailure", "RequestState", "Sender",
    "ServiceError", "Settings", "Turn", "ValidationError", "classify_direction",
    "display_lines", "format_timestamp", "load_settings", "normalize_lesson",
]
