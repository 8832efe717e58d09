"""
Centralized logging configuration for the Aima learning assistant.

Provides consistent, color-coded debug output for:
- Environment/configuration status
- Completion API calls and responses
- Chat and lesson session state changes
- Errors and warnings

Usage:
    from aima.logger import logger

    logger.api("Sending chat completion...")
    logger.success("Lesson cached")
    logger.error("Completion failed", exc_info=True)

Set AIMA_DEBUG=0 to silence output.
"""

import os
import sys
import time
import traceback
from datetime import datetime
from typing import Optional

# ---------------------------------------------------------------------------
# Force UTF-8 output so Arabic text and symbols (✓, ✗, →) print everywhere
# ---------------------------------------------------------------------------
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8")


class ColorCodes:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_BLUE = "\033[94m"
    BRIGHT_CYAN = "\033[96m"


class DebugLogger:
    """
    Debug logger with categorized, color-coded output.

    Categories:
    - ENV: Environment/configuration (dotenv, API keys)
    - API: Completion endpoint calls
    - CHAT: Conversation session events
    - LESN: Lesson session events
    - OK / WARN / ERR / DBG: general status
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._start_time = datetime.now()

    def _timestamp(self) -> str:
        """Get formatted timestamp with elapsed time."""
        now = datetime.now()
        elapsed = (now - self._start_time).total_seconds()
        return f"{now.strftime('%H:%M:%S')}.{now.microsecond // 1000:03d} (+{elapsed:>6.1f}s)"

    def _log(self, category: str, color: str, message: str, **kwargs) -> None:
        if not self.enabled:
            return

        timestamp = self._timestamp()
        prefix = f"{ColorCodes.DIM}{timestamp}{ColorCodes.RESET}"
        tag = f"{color}{ColorCodes.BOLD}[{category:>4}]{ColorCodes.RESET}"
        padding = " " * (len(timestamp) + 8)

        for i, line in enumerate(message.split("\n")):
            if i == 0:
                print(f"{prefix} {tag} {line}", file=sys.stdout, flush=True)
            else:
                print(f"{ColorCodes.DIM}{padding}{ColorCodes.RESET}{line}", file=sys.stdout, flush=True)

        if kwargs.get("exc_info"):
            for line in traceback.format_exc().split("\n"):
                if line.strip():
                    print(f"{ColorCodes.DIM}{padding}{ColorCodes.RED}{line}{ColorCodes.RESET}",
                          file=sys.stderr, flush=True)

    # === Environment/Configuration ===
    def env(self, message: str, **kwargs) -> None:
        """Log environment/configuration messages (dotenv, API keys, etc.)."""
        self._log("ENV", ColorCodes.MAGENTA, message, **kwargs)

    def env_success(self, message: str, **kwargs) -> None:
        self._log("ENV", ColorCodes.GREEN, f"✓ {message}", **kwargs)

    def env_error(self, message: str, **kwargs) -> None:
        self._log("ENV", ColorCodes.RED, f"✗ {message}", **kwargs)

    # === API Calls ===
    def api(self, message: str, **kwargs) -> None:
        self._log("API", ColorCodes.CYAN, message, **kwargs)

    def api_call(self, endpoint: str, model: Optional[str] = None, **kwargs) -> None:
        """Log an API call being made."""
        model_info = f" (model: {model})" if model else ""
        self._log("API", ColorCodes.CYAN, f"→ Calling {endpoint}{model_info}", **kwargs)

    def api_response(self, endpoint: str, duration_ms: Optional[float] = None, **kwargs) -> None:
        """Log an API response received."""
        duration_info = f" ({duration_ms:.0f}ms)" if duration_ms else ""
        self._log("API", ColorCodes.BRIGHT_CYAN, f"← Response from {endpoint}{duration_info}", **kwargs)

    def api_error(self, message: str, **kwargs) -> None:
        self._log("API", ColorCodes.BRIGHT_RED, f"✗ {message}", **kwargs)

    # === Sessions ===
    def chat(self, message: str, **kwargs) -> None:
        """Log conversation session events."""
        self._log("CHAT", ColorCodes.BLUE, message, **kwargs)

    def lesson(self, message: str, **kwargs) -> None:
        """Log lesson session events."""
        self._log("LESN", ColorCodes.YELLOW, message, **kwargs)

    def transition(self, from_state: str, to_state: str, **kwargs) -> None:
        """Log a session state transition."""
        self._log("STAT", ColorCodes.BRIGHT_BLUE, f"{from_state} → {to_state}", **kwargs)

    # === General Status ===
    def success(self, message: str, **kwargs) -> None:
        self._log("OK", ColorCodes.BRIGHT_GREEN, f"✓ {message}", **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log("WARN", ColorCodes.BRIGHT_YELLOW, f"⚠ {message}", **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log("ERR", ColorCodes.BRIGHT_RED, f"✗ {message}", **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        self._log("DBG", ColorCodes.DIM, message, **kwargs)

    def separator(self, title: Optional[str] = None) -> None:
        """Print a visual separator."""
        if not self.enabled:
            return

        if title:
            line = f"{'─' * 20} {title} {'─' * 20}"
        else:
            line = "─" * 60
        print(f"\n{ColorCodes.DIM}{line}{ColorCodes.RESET}\n", file=sys.stdout, flush=True)


# Global logger instance
logger = DebugLogger(enabled=os.getenv("AIMA_DEBUG", "1") != "0")


class Timer:
    """Context manager for timing operations."""

    def __init__(self):
        self.start_time: Optional[float] = None
        self.duration_ms: float = 0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args) -> None:
        if self.start_time:
            self.duration_ms = (time.perf_counter() - self.start_time) * 1000
