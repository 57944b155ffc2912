"""Exceptions raised by the pipeline stages.

Every error carries the name of the stage that failed so callers can
report which part of the run aborted.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for unrecoverable pipeline failures."""

    stage = "pipeline"

    def __init__(self, message: str, stage: str | None = None):
        if stage is not None:
            self.stage = stage
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.stage}] {super().__str__()}"


class MalformedRecordError(PipelineError):
    """A row does not parse into the expected columns."""

    stage = "load"

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class EmptyVocabularyError(PipelineError):
    """No terms are left to build features from."""

    stage = "prune"


class DegenerateLabelDistributionError(PipelineError):
    """A label class is missing where both classes are required."""

    stage = "split"


class NonConvergenceError(PipelineError):
    """The logistic regression could not be fitted."""

    stage = "fit"


class ShapeMismatchError(PipelineError):
    """Rows or columns do not line up between two inputs."""

    stage = "predict"
