"""SIGINT / SIGTERM handling.

The handlers only raise `Interrupted` on the main thread. Whatever is
running there (usually the blocking HTTP call inside the spinner's `with`
block) unwinds normally, which stops the spinner before the error reaches
`main()` and the process exits.
"""
from __future__ import annotations

import signal
from contextlib import contextmanager
from typing import Dict, Iterator, Sequence

from .errors import Interrupted

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _raise_interrupted(signum, frame):
    raise Interrupted(signum, signal.Signals(signum).name)


@contextmanager
def interrupts_raise(signals: Sequence[int] = HANDLED_SIGNALS) -> Iterator[None]:
    previous: Dict[int, object] = {}
    for sig in signals:
        previous[sig] = signal.signal(sig, _raise_interrupted)
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
