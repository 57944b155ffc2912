"""
Document-term matrices over normalised sentences.

The vocabulary is an immutable, lexicographically ordered tuple of
terms produced once by :func:`build_document_term_matrix` and passed
explicitly to every later stage.  Column identity is therefore stable
whatever order or batching the documents arrive in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property, partial
from typing import Iterable, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy import sparse
from sklearn.feature_extraction.text import CountVectorizer

from ..errors import EmptyVocabularyError

LOG = logging.getLogger(__name__)

# Slack for comparing document-frequency ratios against 1 - sparsity.
_RATIO_TOLERANCE = 1e-9


def _split_terms(document: str, min_length: int = 1) -> list:
    return [tok for tok in document.split() if len(tok) >= min_length]


@dataclass(frozen=True)
class Vocabulary:
    terms: Tuple[str, ...]
    min_term_length: int = 1

    def __post_init__(self):
        if list(self.terms) != sorted(set(self.terms)):
            raise ValueError("vocabulary terms must be unique and sorted")

    def __len__(self) -> int:
        return len(self.terms)

    def __contains__(self, term) -> bool:
        return term in self.index

    def __iter__(self):
        return iter(self.terms)

    @cached_property
    def index(self) -> dict:
        return {term: i for i, term in enumerate(self.terms)}

    def index_of(self, term: str) -> int:
        try:
            return self.index[term]
        except KeyError:
            raise KeyError(f"term {term!r} is not in the vocabulary") from None

    def restrict(self, terms: Iterable[str]) -> "Vocabulary":
        keep = set(terms)
        return Vocabulary(
            tuple(t for t in self.terms if t in keep), self.min_term_length
        )

    def _vectorizer(self) -> CountVectorizer:
        return CountVectorizer(
            analyzer=partial(_split_terms, min_length=self.min_term_length),
            vocabulary=self.index,
            dtype=np.int64,
        )

    def transform(self, documents: Sequence[str]) -> "DocumentTermMatrix":
        """Count *documents* against this vocabulary.

        Terms outside the vocabulary are dropped.
        """
        documents = list(documents)
        if not documents or not self.terms:
            matrix = sparse.csr_matrix((len(documents), len(self)), dtype=np.int64)
        else:
            matrix = self._vectorizer().fit_transform(documents).tocsr()
        return DocumentTermMatrix(matrix=matrix, vocabulary=self)


@dataclass(frozen=True)
class DocumentTermMatrix:
    """Sparse document x term counts with their vocabulary."""

    matrix: sparse.csr_matrix
    vocabulary: Vocabulary

    def __post_init__(self):
        if self.matrix.shape[1] != len(self.vocabulary):
            raise ValueError(
                f"matrix has {self.matrix.shape[1]} columns but the vocabulary "
                f"has {len(self.vocabulary)} terms"
            )

    @property
    def n_documents(self) -> int:
        return self.matrix.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.matrix.shape

    def document_frequency(self) -> np.ndarray:
        """Number of documents containing each term."""
        return np.asarray((self.matrix > 0).sum(axis=0)).ravel()

    def sparsity(self) -> pd.Series:
        """Fraction of documents *not* containing each term."""
        if self.n_documents == 0:
            return pd.Series(1.0, index=list(self.vocabulary.terms))
        ratio = self.document_frequency() / self.n_documents
        return pd.Series(1.0 - ratio, index=list(self.vocabulary.terms))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            self.matrix.toarray(), columns=list(self.vocabulary.terms)
        )


def build_document_term_matrix(
    documents: Sequence[str], min_term_length: int = 1
) -> DocumentTermMatrix:
    """Count whitespace-separated terms in already-normalised documents.

    Columns cover every term seen in any document and are sorted
    lexicographically.
    """
    documents = list(documents)
    if not documents:
        raise EmptyVocabularyError("no documents to build a vocabulary from", stage="vectorize")
    vectorizer = CountVectorizer(
        analyzer=partial(_split_terms, min_length=min_term_length),
        dtype=np.int64,
    )
    try:
        matrix = vectorizer.fit_transform(documents).tocsr()
    except ValueError as exc:
        # CountVectorizer refuses an empty vocabulary
        raise EmptyVocabularyError(str(exc), stage="vectorize") from exc
    terms = tuple(vectorizer.get_feature_names_out())
    LOG.info(
        "Built document-term matrix: %d documents x %d terms",
        matrix.shape[0], matrix.shape[1],
    )
    return DocumentTermMatrix(matrix=matrix, vocabulary=Vocabulary(terms, min_term_length))


def prune_sparse_terms(dtm: DocumentTermMatrix, sparsity: float) -> DocumentTermMatrix:
    """Drop terms that appear in too few documents.

    A term survives when the share of documents containing it is at
    least ``1 - sparsity``.  ``sparsity=0.99`` keeps terms found in at
    least 1% of documents; ``sparsity=1.0`` keeps everything.
    """
    if not 0.0 < sparsity <= 1.0:
        raise ValueError(f"sparsity must be in (0, 1], got {sparsity}")
    n_docs = dtm.n_documents
    if n_docs == 0:
        raise EmptyVocabularyError("cannot prune an empty document-term matrix")

    min_docs = (1.0 - sparsity) * n_docs
    keep = np.flatnonzero(dtm.document_frequency() >= min_docs - _RATIO_TOLERANCE * n_docs)
    if keep.size == 0:
        raise EmptyVocabularyError(
            f"no term appears in at least {1.0 - sparsity:.2%} of {n_docs} documents"
        )
    terms = tuple(dtm.vocabulary.terms[i] for i in keep)
    LOG.info(
        "Pruned vocabulary at sparsity %.4f: %d -> %d terms",
        sparsity, len(dtm.vocabulary), len(terms),
    )
    return DocumentTermMatrix(
        matrix=dtm.matrix[:, keep].tocsr(),
        vocabulary=Vocabulary(terms, dtm.vocabulary.min_term_length),
    )
