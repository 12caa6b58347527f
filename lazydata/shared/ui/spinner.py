"""Terminal spinner shown while blocking work runs before the TUI starts."""

from __future__ import annotations

import threading
from types import TracebackType

from rich.console import Console
from rich.text import Text

SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
SPINNER_INTERVAL_S = 0.1


class Spinner:
    """Redraws ``message`` plus a braille frame every 100 ms on one line.

    The drawing thread stops when ``stop()`` sets the shared event; the line
    is cleared afterwards. Usable as a context manager.
    """

    def __init__(self, message: str, *, console: Console | None = None, interval: float = SPINNER_INTERVAL_S) -> None:
        self.message = message
        self.console = console or Console(stderr=True)
        self.interval = interval
        self.frame_index = 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def frame(self) -> str:
        return f"{self.message} {SPINNER_FRAMES[self.frame_index % len(SPINNER_FRAMES)]}"

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="lazydata-spinner", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        if not self.console.is_terminal:
            # Nothing to animate on a pipe; wait for stop() so callers behave the same.
            self._stop.wait()
            return
        while not self._stop.is_set():
            self.console.file.write("\r\x1b[2K")
            self.console.print(Text(self.frame()), end="")
            self.console.file.flush()
            self.frame_index += 1
            self._stop.wait(self.interval)
        self.console.file.write("\r\x1b[2K")
        self.console.file.flush()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def __enter__(self) -> Spinner:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
