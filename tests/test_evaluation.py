"""Tests for the confusion matrix and accuracy."""

import pandas as pd
import pytest

from bow_sentiment.analysis.evaluation import evaluate
from bow_sentiment.errors import ShapeMismatchError


class TestEvaluate:

    def test_counts_and_accuracy(self):
        result = evaluate([1, 0, 1, 1, 0], [1, 0, 0, 1, 1])
        assert result.true_positive == 2
        assert result.true_negative == 1
        assert result.false_negative == 1
        assert result.false_positive == 1
        assert result.accuracy == pytest.approx(0.6, abs=1e-9)

    def test_counts_sum_to_rows(self):
        y_true = [1, 1, 0, 0, 1, 0, 1, 0, 0]
        y_pred = [1, 0, 0, 1, 1, 0, 0, 0, 1]
        result = evaluate(y_true, y_pred)
        assert result.total == len(y_true)
        expected = (result.true_positive + result.true_negative) / result.total
        assert result.accuracy == pytest.approx(expected, abs=1e-9)

    def test_matrix_always_two_by_two(self):
        result = evaluate([1, 1, 1], [1, 1, 1])
        assert result.confusion.shape == (2, 2)
        assert result.confusion.loc[1, 1] == 3
        assert result.confusion.loc[0, 0] == 0
        assert result.accuracy == 1.0

    def test_rows_are_true_labels(self):
        result = evaluate([0, 0], [1, 1])
        assert result.confusion.index.name == "true"
        assert result.confusion.columns.name == "predicted"
        assert result.false_positive == 2

    def test_to_dict(self):
        payload = evaluate([1, 0], [1, 1]).to_dict()
        assert payload["accuracy"] == 0.5
        assert payload["total"] == 2
        assert payload["confusion_matrix"]["false_positive"] == 1

    def test_series_must_share_rows(self):
        y_true = pd.Series([1, 0], index=[10, 11])
        y_pred = pd.Series([1, 0], index=[11, 12])
        with pytest.raises(ShapeMismatchError):
            evaluate(y_true, y_pred)

    def test_length_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            evaluate([1, 0, 1], [1, 0])

    def test_empty(self):
        with pytest.raises(ShapeMismatchError):
            evaluate([], [])

    def test_labels_outside_binary(self):
        with pytest.raises(ValueError):
            evaluate([0, 2], [0, 1])
