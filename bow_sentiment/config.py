"""
Project configuration settings.

Edit the variables in this module, or set the matching environment
variables, to point to your data directories and tune the pipeline.
Keeping configuration in one place makes it easy to override default
behaviour without modifying individual modules.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Base directory for storing input and output data.
BASE_DIR: Path = Path(__file__).resolve().parents[1]

###############################################################################
# Directory paths
###############################################################################

# Raw TSV files (training.txt / testdata.txt) are expected here
DATA_DIR: Path = Path(os.getenv("BOW_SENTIMENT_DATA_DIR", BASE_DIR / "data"))

# Feature tables, coefficient summaries, predictions and metrics
RESULTS_DIR: Path = Path(os.getenv("BOW_SENTIMENT_RESULTS_DIR", BASE_DIR / "results"))

TRAIN_FILE: Path = DATA_DIR / "training.txt"
TEST_FILE: Path = DATA_DIR / "testdata.txt"

###############################################################################
# Pipeline defaults
###############################################################################

SPARSITY: float = 0.99
CUTOFF: float = 0.5
SPLIT_RATIO: float = 0.85
SEED: int = 42
LANGUAGE: str = "english"

# Name of the label column in feature tables.  Terms never contain
# underscores because punctuation is stripped during normalisation.
LABEL_COLUMN: str = "_label"

MISSING_TEXT_POLICIES = ("error", "skip")

# "corpus" builds the vocabulary from training and test sentences together;
# "train" uses the training sentences only.
VOCABULARY_SOURCES = ("corpus", "train")


@dataclass(frozen=True)
class PipelineSettings:
    """Tunable parameters of a pipeline run."""

    sparsity: float = SPARSITY
    cutoff: float = CUTOFF
    split_ratio: float = SPLIT_RATIO
    seed: int = SEED
    language: str = LANGUAGE
    min_term_length: int = 1
    max_iter: int = 100
    on_missing_text: str = "error"
    vocabulary_from: str = "corpus"

    def validate(self) -> "PipelineSettings":
        if not 0.0 < self.sparsity <= 1.0:
            raise ValueError(f"sparsity must be in (0, 1], got {self.sparsity}")
        if not 0.0 <= self.cutoff <= 1.0:
            raise ValueError(f"cutoff must be in [0, 1], got {self.cutoff}")
        if not 0.0 < self.split_ratio < 1.0:
            raise ValueError(f"split_ratio must be in (0, 1), got {self.split_ratio}")
        if self.min_term_length < 1:
            raise ValueError("min_term_length must be at least 1")
        if self.max_iter < 1:
            raise ValueError("max_iter must be at least 1")
        if self.on_missing_text not in MISSING_TEXT_POLICIES:
            raise ValueError(
                f"on_missing_text must be one of {MISSING_TEXT_POLICIES}, "
                f"got {self.on_missing_text!r}"
            )
        if self.vocabulary_from not in VOCABULARY_SOURCES:
            raise ValueError(
                f"vocabulary_from must be one of {VOCABULARY_SOURCES}, "
                f"got {self.vocabulary_from!r}"
            )
        return self

    def with_overrides(self, **changes) -> "PipelineSettings":
        """Return a copy with the non-``None`` values in *changes* applied."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes).validate()

    @classmethod
    def from_env(cls) -> "PipelineSettings":
        """Build settings from ``BOW_SENTIMENT_*`` environment variables."""
        return cls(
            sparsity=float(os.getenv("BOW_SENTIMENT_SPARSITY", SPARSITY)),
            cutoff=float(os.getenv("BOW_SENTIMENT_CUTOFF", CUTOFF)),
            split_ratio=float(os.getenv("BOW_SENTIMENT_SPLIT_RATIO", SPLIT_RATIO)),
            seed=int(os.getenv("BOW_SENTIMENT_SEED", SEED)),
            language=os.getenv("BOW_SENTIMENT_LANGUAGE", LANGUAGE),
        ).validate()
