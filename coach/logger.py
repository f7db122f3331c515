"""
Centralized logging for Language Coach.

Categorized, color-coded console output for:
- Configuration loading (.env, defaults)
- Chat completion and speech synthesis calls
- Local store reads and writes
- UI events and background tasks

Usage:
    from coach.logger import logger

    logger.api("Requesting a new study plan...")
    logger.store_error("Write failed for ll.plan")
    logger.error("Failed to parse exercises", exc_info=True)

Set COACH_QUIET=1 to silence everything, or COACH_DEBUG=0 to hide DBG lines.
"""

import os
import sys
import time
import traceback
from datetime import datetime
from typing import Optional


class Ansi:
    """Terminal escape sequences."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    FAIL = "\033[91m"
    PASS = "\033[92m"
    WARN = "\033[93m"
    ENV = "\033[35m"
    API = "\033[36m"
    API_IN = "\033[96m"
    TTS = "\033[33m"
    STORE = "\033[34m"
    UI = "\033[94m"
    PLAIN = "\033[37m"


def mask_secret(secret: str) -> str:
    """Show only the first 8 and last 4 characters of an API key."""
    if not secret:
        return "<empty>"
    return f"{secret[:8]}...{secret[-4:]}" if len(secret) > 12 else "***"


def _took(duration_ms: Optional[float]) -> str:
    return f" ({duration_ms:.0f}ms)" if duration_ms else ""


class DebugLogger:
    """
    Console logger with one tag per concern.

    Tags:
    - ENV: configuration and .env loading
    - API: chat completion calls
    - TTS: speech synthesis and audio cache
    - STORE: local persistence
    - UI: user interface events
    - TASK: background workers
    - OK / WARN / ERR / DBG: general status

    Lines after the first in a multi-line message are indented under it.
    Passing exc_info=True appends the active traceback on stderr.
    """

    def __init__(self, enabled: bool = True, show_debug: bool = True):
        self.enabled = enabled
        self.show_debug = show_debug
        self._started = datetime.now()

    def _clock(self) -> str:
        now = datetime.now()
        since_start = (now - self._started).total_seconds()
        return f"{now:%H:%M:%S}.{now.microsecond // 1000:03d} (+{since_start:>6.1f}s)"

    def _log(self, tag: str, color: str, message: str, **kwargs) -> None:
        if not self.enabled:
            return

        clock = self._clock()
        head = f"{Ansi.DIM}{clock}{Ansi.RESET} {color}{Ansi.BOLD}[{tag:>5}]{Ansi.RESET}"
        indent = f"{Ansi.DIM}{' ' * (len(clock) + 9)}{Ansi.RESET}"

        # Resolve the stream at call time so captured output works
        out = sys.stdout
        first, *rest = str(message).split("\n")
        print(f"{head} {first}", file=out, flush=True)
        for line in rest:
            print(f"{indent}{line}", file=out, flush=True)

        if kwargs.get("exc_info"):
            for line in traceback.format_exc().rstrip().split("\n"):
                print(f"{indent}{Ansi.FAIL}{line}{Ansi.RESET}", file=sys.stderr, flush=True)

    def _fail(self, tag: str, message: str, **kwargs) -> None:
        self._log(tag, Ansi.FAIL, f"✗ {message}", **kwargs)

    # Configuration
    def env(self, message: str, **kwargs) -> None:
        self._log("ENV", Ansi.ENV, message, **kwargs)

    def env_success(self, message: str, **kwargs) -> None:
        self._log("ENV", Ansi.PASS, f"✓ {message}", **kwargs)

    # Chat completion
    def api(self, message: str, **kwargs) -> None:
        self._log("API", Ansi.API, message, **kwargs)

    def api_call(self, endpoint: str, model: Optional[str] = None, **kwargs) -> None:
        suffix = f" [{model}]" if model else ""
        self._log("API", Ansi.API, f"→ POST {endpoint}{suffix}", **kwargs)

    def api_response(self, endpoint: str, duration_ms: Optional[float] = None, **kwargs) -> None:
        self._log("API", Ansi.API_IN, f"← {endpoint}{_took(duration_ms)}", **kwargs)

    def api_error(self, message: str, **kwargs) -> None:
        self._fail("API", message, **kwargs)

    # Speech
    def tts(self, message: str, **kwargs) -> None:
        self._log("TTS", Ansi.TTS, message, **kwargs)

    def tts_complete(self, path: str, duration_ms: Optional[float] = None, **kwargs) -> None:
        self._log("TTS", Ansi.PASS, f"✓ Clip ready: {path}{_took(duration_ms)}", **kwargs)

    def tts_error(self, message: str, **kwargs) -> None:
        self._fail("TTS", message, **kwargs)

    # Local store
    def store(self, message: str, **kwargs) -> None:
        self._log("STORE", Ansi.STORE, message, **kwargs)

    def store_error(self, message: str, **kwargs) -> None:
        self._fail("STORE", message, **kwargs)

    # UI
    def ui(self, message: str, **kwargs) -> None:
        self._log("UI", Ansi.UI, message, **kwargs)

    def ui_transition(self, from_tab: str, to_tab: str, **kwargs) -> None:
        self._log("UI", Ansi.UI, f"Tab: {from_tab} → {to_tab}", **kwargs)

    # Background work
    def task_start(self, task_name: str, **kwargs) -> None:
        self._log("TASK", Ansi.PLAIN, f"⚡ {task_name} started", **kwargs)

    def task_complete(self, task_name: str, duration_ms: Optional[float] = None, **kwargs) -> None:
        self._log("TASK", Ansi.PASS, f"✓ {task_name} done{_took(duration_ms)}", **kwargs)

    def task_error(self, task_name: str, error: str, **kwargs) -> None:
        self._fail("TASK", f"{task_name} failed: {error}", **kwargs)

    # General
    def success(self, message: str, **kwargs) -> None:
        self._log("OK", Ansi.PASS, f"✓ {message}", **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log("WARN", Ansi.WARN, f"⚠ {message}", **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._fail("ERR", message, **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        if self.show_debug:
            self._log("DBG", Ansi.DIM, message, **kwargs)

    def banner(self, text: str) -> None:
        if not self.enabled:
            return
        rule = "═" * max(60, len(text) + 4)
        title = text.center(len(rule))
        out = sys.stdout
        print(f"\n{Ansi.API_IN}{rule}\n{Ansi.BOLD}{title}{Ansi.RESET}", file=out, flush=True)
        print(f"{Ansi.API_IN}{rule}{Ansi.RESET}\n", file=out, flush=True)


logger = DebugLogger(
    enabled=os.getenv("COACH_QUIET", "") != "1",
    show_debug=os.getenv("COACH_DEBUG", "1") != "0",
)


class Timer:
    """Measures a block in milliseconds: `with Timer() as t: ...; t.duration_ms`."""

    def __init__(self) -> None:
        self._t0: Optional[float] = None
        self.duration_ms: float = 0.0

    def __enter__(self) -> "Timer":
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, *exc) -> None:
        if self._t0 is not None:
            self.duration_ms = (time.perf_counter() - self._t0) * 1000
