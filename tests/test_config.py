"""Tests for pipeline settings."""

import pytest

from bow_sentiment.config import PipelineSettings


def test_defaults():
    settings = PipelineSettings().validate()
    assert settings.sparsity == 0.99
    assert settings.cutoff == 0.5
    assert settings.split_ratio == 0.85
    assert settings.language == "english"
    assert settings.vocabulary_from == "corpus"


@pytest.mark.parametrize("field, value", [
    ("sparsity", 0.0),
    ("sparsity", 1.01),
    ("cutoff", -0.5),
    ("split_ratio", 1.0),
    ("min_term_length", 0),
    ("max_iter", 0),
    ("on_missing_text", "ignore"),
    ("vocabulary_from", "test"),
])
def test_invalid_values(field, value):
    with pytest.raises(ValueError):
        PipelineSettings(**{field: value}).validate()


def test_overrides_skip_none():
    settings = PipelineSettings().with_overrides(seed=7, cutoff=None)
    assert settings.seed == 7
    assert settings.cutoff == 0.5


def test_from_env(monkeypatch):
    monkeypatch.setenv("BOW_SENTIMENT_SPARSITY", "0.995")
    monkeypatch.setenv("BOW_SENTIMENT_SEED", "3000")
    settings = PipelineSettings.from_env()
    assert settings.sparsity == 0.995
    assert settings.seed == 3000


def test_from_env_rejects_bad_value(monkeypatch):
    monkeypatch.setenv("BOW_SENTIMENT_SPLIT_RATIO", "2")
    with pytest.raises(ValueError):
        PipelineSettings.from_env()
