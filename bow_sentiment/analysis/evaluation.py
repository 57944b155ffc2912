"""Confusion matrix and accuracy for held-out predictions."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.metrics import confusion_matrix

from ..errors import ShapeMismatchError

LOG = logging.getLogger(__name__)

LABELS = (0, 1)


@dataclass(frozen=True)
class EvaluationResult:
    """Rows of ``confusion`` are true labels, columns are predicted labels."""

    confusion: pd.DataFrame
    accuracy: float

    @property
    def total(self) -> int:
        return int(self.confusion.to_numpy().sum())

    @property
    def true_negative(self) -> int:
        return int(self.confusion.loc[0, 0])

    @property
    def false_positive(self) -> int:
        return int(self.confusion.loc[0, 1])

    @property
    def false_negative(self) -> int:
        return int(self.confusion.loc[1, 0])

    @property
    def true_positive(self) -> int:
        return int(self.confusion.loc[1, 1])

    def to_dict(self) -> dict:
        return {
            "accuracy": self.accuracy,
            "total": self.total,
            "confusion_matrix": {
                "true_negative": self.true_negative,
                "false_positive": self.false_positive,
                "false_negative": self.false_negative,
                "true_positive": self.true_positive,
            },
        }


def _aligned(true_labels, predicted_labels):
    if isinstance(true_labels, pd.Series) and isinstance(predicted_labels, pd.Series):
        if not true_labels.index.equals(predicted_labels.index):
            raise ShapeMismatchError(
                "true and predicted labels are indexed by different rows",
                stage="evaluate",
            )
    y_true = np.asarray(true_labels)
    y_pred = np.asarray(predicted_labels)
    if y_true.shape != y_pred.shape or y_true.ndim != 1:
        raise ShapeMismatchError(
            f"cannot compare {y_true.shape} true labels with {y_pred.shape} predictions",
            stage="evaluate",
        )
    if y_true.size == 0:
        raise ShapeMismatchError("no rows to evaluate", stage="evaluate")
    return y_true.astype(int), y_pred.astype(int)


def evaluate(true_labels, predicted_labels) -> EvaluationResult:
    """Cross-tabulate true against predicted labels."""
    y_true, y_pred = _aligned(true_labels, predicted_labels)
    unexpected = sorted((set(np.unique(y_true)) | set(np.unique(y_pred))) - set(LABELS))
    if unexpected:
        raise ValueError(f"labels must be 0 or 1, found {unexpected}")
    counts = confusion_matrix(y_true, y_pred, labels=list(LABELS))
    confusion = pd.DataFrame(counts, index=list(LABELS), columns=list(LABELS))
    confusion.index.name = "true"
    confusion.columns.name = "predicted"
    accuracy = float(np.trace(counts)) / float(counts.sum())
    LOG.info("Accuracy %.4f on %d rows", accuracy, int(counts.sum()))
    return EvaluationResult(confusion=confusion, accuracy=accuracy)
