"""
Text normalisation for bag-of-words features.

Every sentence goes through the same five steps, in this order:

1. lowercase;
2. delete punctuation characters;
3. drop stop-words for the configured language;
4. collapse runs of whitespace and trim;
5. stem each remaining token (nltk's Snowball stemmer) until it stops
   changing, dropping tokens whose stem is itself a stop-word.

The order matters: stop-word lists hold surface forms, so removing them
after stemming would let stems such as ``ourselv`` slip through.  One
normaliser instance is applied to training and test sentences together
so both share a single vocabulary.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

import nltk
from nltk.corpus import stopwords as nltk_stopwords
from nltk.stem.snowball import SnowballStemmer

from ..data_collection.loader import Corpus

LOG = logging.getLogger(__name__)

# \w keeps letters and digits; the underscore is punctuation here.
_PUNCTUATION_RE = re.compile(r"[^\w\s]|_")
_WHITESPACE_RE = re.compile(r"\s+")


def load_stopwords(language: str = "english") -> frozenset:
    """Return the nltk stop-word list for *language*.

    The corpus is downloaded quietly the first time it is missing.
    """
    try:
        nltk.data.find("corpora/stopwords")
    except LookupError:
        LOG.info("Downloading nltk stopwords corpus…")
        nltk.download("stopwords", quiet=True)
    return frozenset(nltk_stopwords.words(language))


def lowercase(text: str) -> str:
    return text.lower()


def remove_punctuation(text: str) -> str:
    return _PUNCTUATION_RE.sub("", text)


def remove_stopwords(text: str, stops: Iterable[str]) -> str:
    """Remove stop-words from a whitespace-separated string."""
    stops = stops if isinstance(stops, (set, frozenset)) else set(stops)
    return " ".join(tok for tok in text.split() if tok not in stops)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


class TextNormalizer:
    """Lowercase, strip punctuation and stop-words, then stem.

    Parameters
    ----------
    language : str
        Language for the nltk stop-word list and Snowball stemmer.
    stopwords : iterable of str, optional
        Explicit stop-word list.  Defaults to the nltk list for
        *language*.
    stemmer : object, optional
        Anything with a ``stem(token) -> str`` method.  Defaults to
        ``SnowballStemmer(language)``.
    """

    def __init__(
        self,
        language: str = "english",
        stopwords: Optional[Iterable[str]] = None,
        stemmer=None,
    ):
        self.language = language
        self.stopwords = (
            load_stopwords(language) if stopwords is None else frozenset(stopwords)
        )
        self.stemmer = stemmer if stemmer is not None else SnowballStemmer(language)
        self._stems: dict = {}

    def stem(self, token: str) -> str:
        """Stem *token* repeatedly until the stemmer leaves it unchanged."""
        stem = self._stems.get(token)
        if stem is None:
            seen = {token}
            stem = self.stemmer.stem(token)
            while stem not in seen:
                seen.add(stem)
                stem = self.stemmer.stem(stem)
            self._stems[token] = stem
        return stem

    def normalise(self, text: str) -> str:
        if text is None:
            raise TypeError("cannot normalise a missing (None) text")
        text = lowercase(text)
        text = remove_punctuation(text)
        text = remove_stopwords(text, self.stopwords)
        text = collapse_whitespace(text)
        stems = (self.stem(tok) for tok in text.split(" ") if tok)
        return " ".join(s for s in stems if s and s not in self.stopwords)

    __call__ = normalise


def normalise_corpus(corpus: Corpus, normalizer: TextNormalizer) -> Corpus:
    """Normalise every sentence of the combined train+test corpus."""
    LOG.info(
        "Normalising %d documents (%d train, %d test)…",
        len(corpus), corpus.train_count, corpus.test_count,
    )
    return corpus.with_texts([normalizer.normalise(t) for t in corpus.texts])
