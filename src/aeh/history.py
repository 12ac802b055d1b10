"""Append-only history log: one JSON object per line."""
from __future__ import annotations

import json
import os
from pathlib import Path

from .errors import HistoryError
from .types import HistoryEntry


def append(path: Path, prompt: str, response: str) -> None:
    line = json.dumps(HistoryEntry(prompt=prompt, response=response).to_dict(), ensure_ascii=False)

    try:
        fd = os.open(path, os.O_APPEND | os.O_WRONLY | os.O_CREAT, 0o600)
    except OSError as e:
        raise HistoryError(f"error opening history file ({e})")

    try:
        with os.fdopen(fd, "a", encoding="utf-8", newline="\n") as f:
            f.write(line + "\n")
    except OSError as e:
        raise HistoryError(f"error writing to history file ({e})")
