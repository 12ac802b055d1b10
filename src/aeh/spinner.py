"""Progress indicator shown on stderr while the request is in flight.

The owner asks the spinner to stop by setting `_cancel`; the spinner thread
exiting is the acknowledgment, and `stop()` joins it before returning. By
then the line has been cleared and the cursor restored, so nothing the
caller prints afterwards races with a late frame.
"""
from __future__ import annotations

import sys
import threading
from typing import IO, Mapping, Optional, Sequence

MOON_FRAMES = ("🌑", "🌘", "🌗", "🌕", "🌔", "🌓", "🌒")
DEFAULT_INTERVAL = 0.1

_HIDE_CURSOR = "\033[?25l"
_SHOW_CURSOR = "\033[?25h"
_CLEAR_LINE = "\r                      \r"


def spinner_enabled(environ: Mapping[str, str], is_tty: bool) -> bool:
    v = environ.get("AEH_SPIN", "")
    if v == "":
        return is_tty
    return v == "true"


class Spinner:
    def __init__(
        self,
        frames: Sequence[str] = MOON_FRAMES,
        interval: float = DEFAULT_INTERVAL,
        stream: Optional[IO[str]] = None,
        enabled: bool = True,
    ):
        self.frames = tuple(frames)
        self.interval = interval
        self.stream = stream
        self.enabled = enabled
        self._cancel = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str], stream: Optional[IO[str]] = None) -> "Spinner":
        stream = stream or sys.stderr
        return cls(stream=stream, enabled=spinner_enabled(environ, stream.isatty()))

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _write(self, s: str) -> None:
        if not self.enabled:
            return
        out = self.stream or sys.stderr
        out.write(s)
        out.flush()

    def _run(self, done: Optional[threading.Event]) -> None:
        idx = 0
        self._write(_HIDE_CURSOR)
        try:
            while True:
                if self._cancel.wait(self.interval):
                    return
                if done is not None and done.is_set():
                    return
                self._write("\r" + self.frames[idx])
                idx = (idx + 1) % len(self.frames)
        finally:
            self._write(_CLEAR_LINE)
            self._write(_SHOW_CURSOR)

    def start(self, done: Optional[threading.Event] = None) -> "Spinner":
        if self._thread is not None:
            return self
        self._cancel.clear()
        self._thread = threading.Thread(target=self._run, args=(done,), name="aeh-spinner", daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        # a second stop (or a stop before start) has nothing to do
        if self._thread is None:
            return
        self._cancel.set()
        self._thread.join()
        self._thread = None

    def __enter__(self) -> "Spinner":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
