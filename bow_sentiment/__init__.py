"""
Bag-of-words sentiment classification.

This package turns short labelled sentences into a document-term
matrix and fits a binomial logistic regression over it.  Modules are
organised by stage and can be used independently or orchestrated
together through the high‑level pipeline functions.
"""

from . import config  # noqa: F401
from . import pipelines  # noqa: F401
from .config import PipelineSettings
from .errors import (
    DegenerateLabelDistributionError,
    EmptyVocabularyError,
    MalformedRecordError,
    NonConvergenceError,
    PipelineError,
    ShapeMismatchError,
)
from .pipelines import run_pipeline, run_pipeline_from_corpus, score_texts

__version__ = "0.1.0"

__all__ = [
    "config",
    "pipelines",
    "PipelineSettings",
    "PipelineError",
    "MalformedRecordError",
    "EmptyVocabularyError",
    "DegenerateLabelDistributionError",
    "NonConvergenceError",
    "ShapeMismatchError",
    "run_pipeline",
    "run_pipeline_from_corpus",
    "score_texts",
]
