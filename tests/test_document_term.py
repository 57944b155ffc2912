"""Tests for the vocabulary, document-term matrix and sparse-term pruning."""

import numpy as np
import pytest

from bow_sentiment.data_processing.document_term import (
    Vocabulary,
    build_document_term_matrix,
    prune_sparse_terms,
)
from bow_sentiment.errors import EmptyVocabularyError


class TestBuild:

    def test_counts_and_sorted_columns(self):
        dtm = build_document_term_matrix(["b a", "c a a"])
        assert dtm.vocabulary.terms == ("a", "b", "c")
        np.testing.assert_array_equal(dtm.matrix.toarray(), [[1, 1, 0], [2, 0, 1]])

    def test_columns_do_not_depend_on_batching(self):
        train = ["great film", "bad plot", "great cast"]
        test = ["awful film", "plot twist"]
        combined = build_document_term_matrix(train + test)
        reordered = build_document_term_matrix(test[::-1] + train[::-1])
        assert combined.vocabulary == reordered.vocabulary

    def test_min_term_length(self):
        dtm = build_document_term_matrix(["a bb ccc", "dddd"], min_term_length=3)
        assert dtm.vocabulary.terms == ("ccc", "dddd")

    def test_no_documents(self):
        with pytest.raises(EmptyVocabularyError):
            build_document_term_matrix([])

    def test_only_empty_documents(self):
        with pytest.raises(EmptyVocabularyError):
            build_document_term_matrix(["", "  "])

    def test_sparsity_and_frame(self):
        dtm = build_document_term_matrix(["a b", "a", "a c", "a"])
        assert dtm.sparsity().to_dict() == {"a": 0.0, "b": 0.75, "c": 0.75}
        frame = dtm.to_frame()
        assert list(frame.columns) == ["a", "b", "c"]
        assert frame["a"].tolist() == [1, 1, 1, 1]


class TestVocabulary:

    def test_must_be_sorted_and_unique(self):
        with pytest.raises(ValueError):
            Vocabulary(("b", "a"))
        with pytest.raises(ValueError):
            Vocabulary(("a", "a"))

    def test_lookup(self):
        vocab = Vocabulary(("bad", "great"))
        assert "great" in vocab
        assert "film" not in vocab
        assert vocab.index_of("great") == 1
        with pytest.raises(KeyError):
            vocab.index_of("film")

    def test_transform_drops_unseen_terms(self):
        vocab = Vocabulary(("bad", "great"))
        dtm = vocab.transform(["great great film", "unseen"])
        np.testing.assert_array_equal(dtm.matrix.toarray(), [[0, 2], [0, 0]])
        assert dtm.vocabulary is vocab

    def test_transform_no_documents(self):
        dtm = Vocabulary(("bad",)).transform([])
        assert dtm.shape == (0, 1)

    def test_restrict(self):
        vocab = Vocabulary(("a", "b", "c")).restrict(["c", "a", "z"])
        assert vocab.terms == ("a", "c")


@pytest.fixture
def graded_dtm():
    """20 documents: 'common' in all, 'half' in 10, 'rare' in 2, 'once' in 1."""
    docs = []
    for i in range(20):
        words = ["common"]
        if i < 10:
            words.append("half")
        if i < 2:
            words.append("rare")
        if i == 0:
            words.append("once")
        docs.append(" ".join(words))
    return build_document_term_matrix(docs)


class TestPrune:

    def test_full_sparsity_keeps_everything(self, graded_dtm):
        pruned = prune_sparse_terms(graded_dtm, 1.0)
        assert pruned.vocabulary == graded_dtm.vocabulary
        assert pruned.shape == graded_dtm.shape

    def test_tiny_sparsity_keeps_only_most_frequent(self, graded_dtm):
        pruned = prune_sparse_terms(graded_dtm, 1e-6)
        assert pruned.vocabulary.terms == ("common",)

    def test_threshold_is_inclusive(self, graded_dtm):
        # 'half' appears in exactly 50% of documents
        assert prune_sparse_terms(graded_dtm, 0.5).vocabulary.terms == ("common", "half")

    def test_one_percent_reference_threshold(self):
        docs = ["common"] * 99 + ["common rare"]
        pruned = prune_sparse_terms(build_document_term_matrix(docs), 0.99)
        assert "rare" in pruned.vocabulary

    def test_monotonic(self, graded_dtm):
        thresholds = [0.05, 0.5, 0.9, 0.95, 1.0]
        kept = [set(prune_sparse_terms(graded_dtm, t).vocabulary) for t in thresholds]
        for stricter, looser in zip(kept, kept[1:]):
            assert stricter <= looser

    def test_counts_follow_surviving_columns(self, graded_dtm):
        pruned = prune_sparse_terms(graded_dtm, 0.5)
        np.testing.assert_array_equal(
            pruned.matrix.toarray(),
            graded_dtm.matrix.toarray()[:, [0, 1]],
        )

    def test_nothing_survives(self):
        dtm = build_document_term_matrix(["a", "b", "c", "d"])
        with pytest.raises(EmptyVocabularyError):
            prune_sparse_terms(dtm, 0.5)

    @pytest.mark.parametrize("sparsity", [0.0, -0.1, 1.5])
    def test_invalid_sparsity(self, graded_dtm, sparsity):
        with pytest.raises(ValueError):
            prune_sparse_terms(graded_dtm, sparsity)
