"""Tests for writing pipeline artefacts."""

import json
from pathlib import Path

import pandas as pd
import pytest

from bow_sentiment.utils.file_io import write_artifacts


def _artifacts():
    return {
        "a.csv": pd.DataFrame({"x": [1, 2]}),
        "b.json": {"accuracy": 0.5},
        "c.csv": pd.DataFrame({"y": [3]}),
    }


def test_writes_every_file(tmp_path):
    paths = write_artifacts(_artifacts(), tmp_path / "out")
    assert [p.name for p in paths] == ["a.csv", "b.json", "c.csv"]
    assert json.loads((tmp_path / "out" / "b.json").read_text(encoding="utf-8")) == {
        "accuracy": 0.5,
    }
    assert sorted(p.name for p in (tmp_path / "out").iterdir()) == ["a.csv", "b.json", "c.csv"]


def test_failed_write_leaves_no_partial_outputs(tmp_path, monkeypatch):
    out = tmp_path / "out"
    out.mkdir()
    (out / "a.csv").write_text("previous\n", encoding="utf-8")

    original = Path.write_text
    calls = []

    def failing_write_text(self, *args, **kwargs):
        calls.append(self.name)
        if len(calls) == 3:
            raise OSError("disk full")
        return original(self, *args, **kwargs)

    monkeypatch.setattr(Path, "write_text", failing_write_text)
    with pytest.raises(OSError, match="disk full"):
        write_artifacts(_artifacts(), out)
    monkeypatch.undo()

    assert sorted(p.name for p in out.iterdir()) == ["a.csv"]
    assert (out / "a.csv").read_text(encoding="utf-8") == "previous\n"
