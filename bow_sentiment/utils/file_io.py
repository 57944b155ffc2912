"""File input/output helper functions."""

import json
import logging
from pathlib import Path

import pandas as pd


def write_csv(df, path, index=False):
    """Write a DataFrame to a CSV file."""
    path = Path(path)
    try:
        df.to_csv(path, index=index)
    except Exception as exc:
        logging.error("Failed to write CSV file %s: %s", path, exc)
        raise


def write_artifacts(artifacts, output_dir):
    """Write a mapping of file name -> DataFrame or JSON-able object.

    Everything is rendered to memory, then written under temporary names
    and only renamed into place once every file has been written.  If a
    write fails the temporary files are removed and any existing outputs
    in *output_dir* are left as they were.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    rendered = {}
    for name, obj in artifacts.items():
        if isinstance(obj, pd.DataFrame):
            rendered[name] = obj.to_csv(index=False)
        else:
            rendered[name] = json.dumps(obj, ensure_ascii=False, indent=2)
    staged = []
    try:
        for name, text in rendered.items():
            tmp = output_dir / f".{name}.tmp"
            staged.append((tmp, output_dir / name))
            tmp.write_text(text, encoding="utf-8")
    except Exception as exc:
        logging.error("Failed to write %s: %s", staged[-1][1], exc)
        for tmp, _ in staged:
            tmp.unlink(missing_ok=True)
        raise
    written = []
    for tmp, path in staged:
        tmp.replace(path)
        written.append(path)
    return written
