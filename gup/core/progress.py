"""Console progress reporting for long-running pipeline stages."""

from __future__ import annotations

import itertools
import sys
import threading
import time
from typing import Callable, Optional, Protocol, TextIO, TypeVar

_T = TypeVar("_T")

# Braille-dot frames, close to the spinner the updater has always shown.
SPINNER_FRAMES = "⣾⣽⣻⢿⡿⣟⣯⣷"


class ProgressReporter(Protocol):
    """Anything that can bracket a blocking operation with start/stop."""

    final_message: str

    def start(self) -> None: ...

    def stop(self) -> None: ...


class NullReporter:
    """Reporter that does nothing; used for ``--quiet`` and in tests."""

    def __init__(self, final_message: str = "") -> None:
        self.final_message = final_message
        self.started = 0
        self.stopped = 0

    def start(self) -> None:
        self.started += 1

    def stop(self) -> None:
        self.stopped += 1


class Spinner:
    """
    Thread-based spinner that can be started and stopped repeatedly.

    ``stop()`` erases the spinner and writes ``final_message``. Calling
    ``stop()`` on a spinner that is not running is a no-op.
    """

    def __init__(
        self,
        frames: str = SPINNER_FRAMES,
        interval: float = 0.1,
        final_message: str = "\n",
        stream: Optional[TextIO] = None,
    ) -> None:
        self.frames = frames
        self.interval = interval
        self.final_message = final_message
        self.stream = stream if stream is not None else sys.stderr
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return self._thread is not None

    def _spin(self) -> None:
        for ch in itertools.cycle(self.frames):
            if self._stop.is_set():
                break
            self.stream.write(ch)
            self.stream.flush()
            time.sleep(self.interval)
            self.stream.write("\b")
            self.stream.flush()

    def start(self) -> None:
        """Begin animating in a background thread (hiding the cursor)."""
        if self._thread is not None:
            return
        self._stop.clear()
        self.stream.write("\033[?25l")
        self._thread = threading.Thread(target=self._spin, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop animating, clear the line and print the final message."""
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None
        self.stream.write("\r\033[K\033[?25h")
        if self.final_message:
            self.stream.write(self.final_message)
        self.stream.flush()

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def run_with_reporter(func: Callable[[], _T], reporter: ProgressReporter) -> _T:
    """Execute ``func`` with ``reporter`` running, stopping it on every exit path."""
    reporter.start()
    try:
        return func()
    finally:
        reporter.stop()


__all__ = [
    "ProgressReporter",
    "NullReporter",
    "Spinner",
    "run_with_reporter",
    "SPINNER_FRAMES",
]
