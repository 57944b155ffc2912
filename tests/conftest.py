"""
Shared pytest fixtures for the bow_sentiment test suite.

The stop-word list is injected so no test depends on downloading the
nltk corpus; the Snowball stemmer ships with nltk itself.

Toy corpus layout (great, bad term counts after normalisation):

    positive: (1,0) x3, (1,1), (1,2)
    negative: (0,1) x3, (1,1), (2,1)

The two classes mirror each other, so the maximum-likelihood fit is
finite and symmetric: P(great only) = 0.75, P(bad only) = 0.25.
"""

import pytest

from bow_sentiment.data_collection.loader import SentenceRecord, build_corpus
from bow_sentiment.data_processing.utils import TextNormalizer


STOPWORDS = frozenset({
    "a", "an", "and", "but", "i", "is", "it", "of", "ourselves",
    "so", "the", "this", "to", "very", "was",
})

POSITIVE = ["This is great!", "Great.", "It was great", "great but bad", "Great, bad and bad"]
NEGATIVE = ["This is bad!", "Bad.", "It was bad", "great but bad", "Great, great and bad"]
TEST_SENTENCES = ["Great!", "So bad."]


# ===========================
# Normaliser Fixtures
# ===========================

@pytest.fixture(scope="session")
def stopword_list() -> frozenset:
    return STOPWORDS


@pytest.fixture
def normalizer(stopword_list) -> TextNormalizer:
    """English Snowball stemmer with the small injected stop-word list."""
    return TextNormalizer(language="english", stopwords=stopword_list)


# ===========================
# Corpus Fixtures
# ===========================

@pytest.fixture
def toy_records():
    """Ten labelled sentences: five positive, five negative."""
    return [SentenceRecord(t, 1) for t in POSITIVE] + [SentenceRecord(t, 0) for t in NEGATIVE]


@pytest.fixture
def toy_corpus(toy_records):
    """The ten toy sentences plus two unlabelled ones."""
    return build_corpus(toy_records, [SentenceRecord(t) for t in TEST_SENTENCES])


@pytest.fixture
def repeated_corpus(toy_records):
    """Six copies of the toy training sentences, enough to split and still fit."""
    return build_corpus(toy_records * 6, [SentenceRecord(t) for t in TEST_SENTENCES])


@pytest.fixture
def toy_tsv_files(tmp_path, toy_records):
    """Write the repeated toy corpus to training/test TSV files."""
    train = tmp_path / "training.txt"
    test = tmp_path / "testdata.txt"
    train.write_text(
        "\n".join(f"{r.label}\t{r.text}" for r in toy_records * 6) + "\n",
        encoding="utf-8",
    )
    test.write_text("\n".join(TEST_SENTENCES) + "\n", encoding="utf-8")
    return train, test
