from __future__ import annotations

import json
from pathlib import Path

from codecells.logging import CellEvent, JsonlEventJournal, utc_timestamp


def test_journal_writes_one_json_object_per_event(tmp_path: Path) -> None:
    journal = JsonlEventJournal(tmp_path / "nested" / "events.jsonl")

    journal.record("cell.run", tmp_path / "a.py", cell="first", metadata={"line": 3})

    lines = journal.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert set(event.keys()) == {"cell", "error_code", "event", "metadata", "ok", "path", "timestamp"}
    assert event["event"] == "cell.run"
    assert event["cell"] == "first"
    assert event["ok"] is True
    assert event["error_code"] is None
    assert event["metadata"] == {"line": 3}
    assert event["timestamp"].endswith("Z")


def test_read_respects_limit_and_since(tmp_path: Path) -> None:
    journal = JsonlEventJournal(tmp_path / "events.jsonl")
    for index, stamp in enumerate(["2024-01-01T00:00:00.000Z", "2024-06-01T00:00:00.000Z"]):
        journal.append(
            CellEvent(
                timestamp=stamp,
                event="file.redeclare",
                path=f"f{index}.py",
                cell=None,
                ok=True,
                error_code=None,
            )
        )
    journal.record("cell.run", Path("f2.py"))

    assert [entry["path"] for entry in journal.read(limit=2)] == ["f1.py", "f2.py"]
    assert [entry["path"] for entry in journal.read(since="2024-03-01")] == ["f1.py", "f2.py"]
    assert journal.read(limit=0) == []


def test_read_skips_corrupt_lines(tmp_path: Path) -> None:
    path = tmp_path / "events.jsonl"
    path.write_text('{not json\n\n{"timestamp": "t", "event": "x"}\n', encoding="utf-8")

    assert JsonlEventJournal(path).read() == [{"timestamp": "t", "event": "x"}]


def test_utc_timestamp_format() -> None:
    stamp = utc_timestamp()

    assert stamp.endswith("Z")
    assert "T" in stamp
