"""
Feature tables and evaluation splits.

A :class:`FeatureTable` keeps one row per document in corpus order,
with the training labels re-attached to the first ``train_count`` rows.
The train/test boundary is carried explicitly so it never has to be
inferred from row positions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from ..config import LABEL_COLUMN
from ..data_collection.loader import Corpus
from ..errors import DegenerateLabelDistributionError, ShapeMismatchError
from .document_term import DocumentTermMatrix, Vocabulary

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureTable:
    frame: pd.DataFrame
    vocabulary: Vocabulary
    train_count: int
    test_count: int

    @property
    def feature_names(self) -> list:
        return list(self.vocabulary.terms)

    def features(self) -> pd.DataFrame:
        """Term columns for every row, without labels."""
        return self.frame[self.feature_names]

    def train_frame(self) -> pd.DataFrame:
        """The labelled training rows (features plus label column)."""
        return self.frame.iloc[: self.train_count]

    def test_frame(self) -> pd.DataFrame:
        """The unlabelled test rows (features only)."""
        return self.frame.iloc[self.train_count:][self.feature_names]


def assemble_feature_table(dtm: DocumentTermMatrix, corpus: Corpus) -> FeatureTable:
    """Turn a matrix over the combined corpus into a labelled table."""
    if dtm.n_documents != len(corpus):
        raise ShapeMismatchError(
            f"matrix has {dtm.n_documents} rows but the corpus has "
            f"{len(corpus)} documents ({corpus.train_count} train + "
            f"{corpus.test_count} test)",
            stage="assemble",
        )
    frame = dtm.to_frame()
    labels = pd.Series(pd.NA, index=frame.index, dtype="Int64")
    labels.iloc[: corpus.train_count] = corpus.labels
    frame[LABEL_COLUMN] = labels
    LOG.info(
        "Assembled feature table: %d rows x %d terms", len(frame), len(dtm.vocabulary)
    )
    return FeatureTable(
        frame=frame,
        vocabulary=dtm.vocabulary,
        train_count=corpus.train_count,
        test_count=corpus.test_count,
    )


@dataclass(frozen=True)
class SplitPartition:
    """Boolean row assignment: ``True`` rows train the model, the rest evaluate it."""

    mask: np.ndarray
    ratio: float
    seed: int

    @property
    def train_indices(self) -> np.ndarray:
        return np.flatnonzero(self.mask)

    @property
    def test_indices(self) -> np.ndarray:
        return np.flatnonzero(~self.mask)

    def apply(self, frame: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
        if len(frame) != len(self.mask):
            raise ShapeMismatchError(
                f"partition covers {len(self.mask)} rows, frame has {len(frame)}",
                stage="split",
            )
        return frame.iloc[self.train_indices], frame.iloc[self.test_indices]


def stratified_split(labels: Sequence[int], ratio: float, seed: int) -> SplitPartition:
    """Split rows so both parts keep the overall label ratio.

    Roughly ``ratio`` of each class goes to the evaluation-train part.
    The same labels, ratio and seed always give the same partition.
    """
    if not 0.0 < ratio < 1.0:
        raise ValueError(f"split ratio must be in (0, 1), got {ratio}")
    y = np.asarray(pd.Series(labels).astype("Int64"))
    if pd.isna(y).any():
        raise DegenerateLabelDistributionError("labels contain missing values")
    classes, counts = np.unique(y.astype(int), return_counts=True)
    if len(classes) < 2:
        raise DegenerateLabelDistributionError(
            f"stratified split needs both label classes, found only {classes.tolist()}"
        )
    if counts.min() < 2:
        raise DegenerateLabelDistributionError(
            f"every label class needs at least two rows, got {dict(zip(classes.tolist(), counts.tolist()))}"
        )

    positions = np.arange(len(y))
    try:
        train_pos, _ = train_test_split(
            positions,
            train_size=ratio,
            random_state=seed,
            stratify=y.astype(int),
        )
    except ValueError as exc:
        # the rounded partition sizes leave a class with no room
        raise DegenerateLabelDistributionError(str(exc)) from exc
    mask = np.zeros(len(y), dtype=bool)
    mask[train_pos] = True
    LOG.info(
        "Stratified split (ratio=%.2f, seed=%d): %d train / %d test rows",
        ratio, seed, int(mask.sum()), int((~mask).sum()),
    )
    return SplitPartition(mask=mask, ratio=ratio, seed=seed)
