import json

import pytest

from aeh import history
from aeh.errors import HistoryError


def test_append_round_trip_in_call_order(tmp_path):
    path = tmp_path / "history.json"
    pairs = [("hello", "hi there"), ("multi\nline", "ünïcode \"quoted\""), ("", "")]
    for p, r in pairs:
        history.append(path, p, r)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line) for line in lines] == [{"Prompt": p, "Response": r} for p, r in pairs]


def test_append_never_truncates(tmp_path):
    path = tmp_path / "history.json"
    path.write_text('{"Prompt": "old", "Response": "old"}\n', encoding="utf-8")
    history.append(path, "new", "new")
    assert len(path.read_text(encoding="utf-8").splitlines()) == 2


def test_append_failure_is_reported(tmp_path):
    with pytest.raises(HistoryError, match="error opening history file"):
        history.append(tmp_path / "missing" / "history.json", "p", "r")
