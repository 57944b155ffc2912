"""
Load labelled and unlabelled sentences from tab-separated files.

Training files hold two columns, a 0/1 sentiment label followed by the
sentence.  Test files hold the sentence only.  Neither has a header and
quote characters are ordinary text, so lines are split on tabs only.
Training records always precede test records in a corpus so the two
partitions can be recovered later from their counts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

import pandas as pd

from ..errors import MalformedRecordError

LOG = logging.getLogger(__name__)

VALID_LABELS = (0, 1)


@dataclass(frozen=True)
class SentenceRecord:
    text: Optional[str]
    label: Optional[int] = None


@dataclass(frozen=True)
class Corpus:
    """Training records followed by test records."""

    train: Tuple[SentenceRecord, ...]
    test: Tuple[SentenceRecord, ...] = ()

    @property
    def records(self) -> Tuple[SentenceRecord, ...]:
        return self.train + self.test

    @property
    def texts(self) -> list:
        return [r.text for r in self.records]

    @property
    def labels(self) -> list:
        return [r.label for r in self.train]

    @property
    def train_count(self) -> int:
        return len(self.train)

    @property
    def test_count(self) -> int:
        return len(self.test)

    def __len__(self) -> int:
        return self.train_count + self.test_count

    def with_texts(self, texts: Sequence[str]) -> "Corpus":
        """Return a corpus with the same labels and partition but new texts."""
        if len(texts) != len(self):
            raise ValueError(
                f"expected {len(self)} texts, got {len(texts)}"
            )
        train = tuple(replace(r, text=t) for r, t in zip(self.train, texts))
        test = tuple(
            replace(r, text=t) for r, t in zip(self.test, texts[self.train_count:])
        )
        return Corpus(train=train, test=test)


def _read_tsv(lines: Iterable[str], n_columns: int, name: str) -> pd.DataFrame:
    """Split raw lines into a frame indexed by their 1-based line number.

    Every non-blank line must hold exactly ``n_columns - 1`` tabs.  Blank
    lines are skipped but still counted, so line numbers in errors match
    the file.
    """
    rows = []
    line_numbers = []
    for line_number, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if not line:
            continue
        fields = line.split("\t")
        if len(fields) != n_columns:
            raise MalformedRecordError(
                f"{name}: expected {n_columns} tab-separated column(s), found {len(fields)}",
                line_number=line_number,
            )
        rows.append(fields)
        line_numbers.append(line_number)
    return pd.DataFrame(
        rows,
        columns=range(n_columns),
        index=pd.Index(line_numbers, name="line"),
        dtype=str,
    )


def _parse_label(value: str, line_number: int) -> int:
    try:
        label = int(value.strip())
    except ValueError:
        raise MalformedRecordError(
            f"label {value!r} is not an integer", line_number=line_number
        ) from None
    if label not in VALID_LABELS:
        raise MalformedRecordError(
            f"label {label} is not one of {VALID_LABELS}", line_number=line_number
        )
    return label


def _training_records(df: pd.DataFrame) -> Tuple[SentenceRecord, ...]:
    return tuple(
        SentenceRecord(text=text, label=_parse_label(label, int(line_number)))
        for line_number, label, text in zip(df.index, df[0], df[1])
    )


def _test_records(df: pd.DataFrame) -> Tuple[SentenceRecord, ...]:
    return tuple(SentenceRecord(text=text) for text in df[0])


def read_training_records(path) -> Tuple[SentenceRecord, ...]:
    """Read a ``label<TAB>text`` file into labelled records."""
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        records = _training_records(_read_tsv(fh, 2, path.name))
    LOG.info("Loaded %d training records from %s", len(records), path)
    return records


def read_test_records(path) -> Tuple[SentenceRecord, ...]:
    """Read a one-column ``text`` file into unlabelled records."""
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        records = _test_records(_read_tsv(fh, 1, path.name))
    LOG.info("Loaded %d test records from %s", len(records), path)
    return records


def parse_training_lines(lines: Iterable[str]) -> Tuple[SentenceRecord, ...]:
    return _training_records(_read_tsv(lines, 2, "<training lines>"))


def parse_test_lines(lines: Iterable[str]) -> Tuple[SentenceRecord, ...]:
    return _test_records(_read_tsv(lines, 1, "<test lines>"))


def build_corpus(
    train: Iterable[SentenceRecord],
    test: Iterable[SentenceRecord] = (),
    on_missing_text: str = "error",
) -> Corpus:
    """Assemble a corpus, applying the missing-text policy.

    Records whose text is ``None`` raise :class:`MalformedRecordError`
    under the ``"error"`` policy and are dropped under ``"skip"``.
    """
    kept = []
    for partition_name, records in (("training", train), ("test", test)):
        part = []
        for i, record in enumerate(records, start=1):
            if record.text is None:
                if on_missing_text == "skip":
                    LOG.warning("Skipping %s record %d with no text", partition_name, i)
                    continue
                raise MalformedRecordError(
                    f"{partition_name} record has no text", line_number=i
                )
            if partition_name == "training" and record.label not in VALID_LABELS:
                raise MalformedRecordError(
                    f"training record has label {record.label!r}", line_number=i
                )
            part.append(record)
        kept.append(tuple(part))
    return Corpus(train=kept[0], test=kept[1])
