"""
Normalization of raw completion text into displayable units.

Lesson replies are split into one line per explanatory point; chat replies
stay whole. Direction detection only feeds rendering metadata.
"""

import re
from datetime import datetime
from typing import Iterable, List

from .models import Direction, DisplayLine

NO_CONTENT = "No content available."

_ARABIC_RE = re.compile(r"[\u0600-\u06FF]")


def normalize_lesson(raw: str) -> List[str]:
    """
    Split a lesson reply into its non-empty lines, preserving order.

    Returns [NO_CONTENT] when nothing but whitespace is left.
    """
    lines = [line for line in (raw or "").splitlines() if line.strip()]
    return lines or [NO_CONTENT]


def classify_direction(text: str) -> Direction:
    """RTL iff the text contains at least one Arabic-block code point."""
    return Direction.RTL if _ARABIC_RE.search(text or "") else Direction.LTR


_ALIGNMENT = {Direction.RTL: "right", Direction.LTR: "left"}


def text_alignment(text: str) -> str:
    return _ALIGNMENT[classify_direction(text)]


def display_lines(lines: Iterable[str]) -> List[DisplayLine]:
    """Attach direction/alignment metadata to each line."""
    result = []
    for line in lines:
        direction = classify_direction(line)
        result.append(DisplayLine(text=line, direction=direction, align=_ALIGNMENT[direction]))
    return result


def format_timestamp(instant: datetime) -> str:
    """Chat bubble time label, e.g. '09:05 PM'."""
    return instant.strftime("%I:%M %p")
