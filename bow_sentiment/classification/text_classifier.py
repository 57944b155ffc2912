"""
Binomial logistic regression over bag-of-words feature tables.

Models are fitted by maximum likelihood with statsmodels' ``Logit``
(Newton-Raphson, equivalent to iteratively reweighted least squares)
so that standard errors and p-values come with the estimates.  Fits
that do not yield a usable maximum (rank-deficient designs, perfect
separation, an optimiser that runs out of iterations) raise
:class:`~bow_sentiment.errors.NonConvergenceError` instead of returning
estimates that drifted towards infinity.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd
import statsmodels.api as sm
from scipy.special import expit
from statsmodels.tools.sm_exceptions import (
    ConvergenceWarning,
    HessianInversionWarning,
    PerfectSeparationError,
    PerfectSeparationWarning,
)

from ..config import CUTOFF, LABEL_COLUMN
from ..errors import (
    DegenerateLabelDistributionError,
    EmptyVocabularyError,
    NonConvergenceError,
    ShapeMismatchError,
)

LOG = logging.getLogger(__name__)

INTERCEPT = "(Intercept)"

_FIT_WARNINGS = (ConvergenceWarning, HessianInversionWarning, PerfectSeparationWarning)


@dataclass(frozen=True)
class LogisticModel:
    """A fitted model.  Construct with :func:`fit_logistic_regression`."""

    feature_names: Tuple[str, ...]
    coefficients: pd.Series
    std_errors: pd.Series
    z_values: pd.Series
    p_values: pd.Series
    nobs: int
    log_likelihood: float
    aic: float
    iterations: int
    converged: bool = True

    @property
    def intercept(self) -> float:
        return float(self.coefficients[INTERCEPT])

    def _design(self, frame: pd.DataFrame) -> np.ndarray:
        columns = [c for c in frame.columns if c != LABEL_COLUMN]
        expected = set(self.feature_names)
        extra = sorted(set(columns) - expected)
        missing = sorted(expected - set(columns))
        if extra or missing:
            raise ShapeMismatchError(
                f"feature columns do not match the fitted model "
                f"(unexpected: {extra[:10]}, missing: {missing[:10]})"
            )
        return frame[list(self.feature_names)].astype(float).to_numpy()

    def linear_predictor(self, frame: pd.DataFrame) -> pd.Series:
        weights = self.coefficients[list(self.feature_names)].to_numpy()
        eta = self.intercept + self._design(frame) @ weights
        return pd.Series(eta, index=frame.index, name="linear_predictor")

    def predict_proba(self, frame: pd.DataFrame) -> pd.Series:
        """Probability of the positive class for every row of *frame*.

        A label column, if present, is ignored.  Columns must otherwise
        match the training features exactly.
        """
        eta = self.linear_predictor(frame)
        return pd.Series(expit(eta.to_numpy()), index=frame.index, name="probability")

    def predict(self, frame: pd.DataFrame, cutoff: float = CUTOFF) -> pd.Series:
        return apply_cutoff(self.predict_proba(frame), cutoff)


def apply_cutoff(probabilities, cutoff: float = CUTOFF) -> pd.Series:
    """Label 1 where the probability is strictly above *cutoff*, else 0."""
    if not 0.0 <= cutoff <= 1.0:
        raise ValueError(f"cutoff must be in [0, 1], got {cutoff}")
    probabilities = pd.Series(probabilities, dtype=float)
    if ((probabilities < 0) | (probabilities > 1)).any():
        raise ValueError("probabilities must lie in [0, 1]")
    return (probabilities > cutoff).astype(int).rename("prediction")


def _check_labels(y: pd.Series) -> pd.Series:
    if y.isna().any():
        raise DegenerateLabelDistributionError(
            "training labels contain missing values", stage="fit"
        )
    y = y.astype(int)
    present = sorted(set(y.tolist()))
    if present != [0, 1]:
        raise DegenerateLabelDistributionError(
            f"logistic regression needs labels 0 and 1, found {present}", stage="fit"
        )
    return y


def _check_rank(design: pd.DataFrame) -> None:
    rank = np.linalg.matrix_rank(design.to_numpy())
    if rank < design.shape[1]:
        constant = [
            c for c in design.columns
            if c != INTERCEPT and design[c].nunique() <= 1
        ]
        detail = f"; constant features: {constant[:10]}" if constant else ""
        raise NonConvergenceError(
            f"design matrix is rank deficient (rank {rank} < {design.shape[1]} "
            f"columns), features are collinear{detail}"
        )


def fit_logistic_regression(
    frame: pd.DataFrame,
    label_column: str = LABEL_COLUMN,
    max_iter: int = 100,
) -> LogisticModel:
    """Fit ``label ~ intercept + terms`` by maximum likelihood."""
    if label_column not in frame.columns:
        raise ShapeMismatchError(
            f"training frame has no label column {label_column!r}", stage="fit"
        )
    X = frame.drop(columns=[label_column]).astype(float)
    if X.shape[1] == 0:
        raise EmptyVocabularyError("no feature columns to fit on", stage="fit")
    y = _check_labels(frame[label_column])

    design = X.copy()
    design.insert(0, INTERCEPT, 1.0)
    _check_rank(design)

    LOG.info(
        "Fitting logistic regression on %d rows x %d features…", len(design), X.shape[1]
    )
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            result = sm.Logit(y.astype(float), design).fit(
                method="newton", maxiter=max_iter, disp=False
            )
        except (np.linalg.LinAlgError, PerfectSeparationError) as exc:
            raise NonConvergenceError(f"logistic regression failed: {exc}") from exc

    for warning in caught:
        if issubclass(warning.category, _FIT_WARNINGS):
            raise NonConvergenceError(
                f"logistic regression did not converge: {warning.message}"
            )
        warnings.warn_explicit(
            warning.message, warning.category, warning.filename, warning.lineno
        )
    retvals = result.mle_retvals or {}
    if not retvals.get("converged", False):
        raise NonConvergenceError(
            f"logistic regression did not converge within {max_iter} iterations"
        )
    if not np.all(np.isfinite(result.params)) or not np.all(np.isfinite(result.bse)):
        raise NonConvergenceError("logistic regression produced non-finite estimates")

    LOG.info(
        "Converged after %s iterations (log-likelihood %.4f)",
        retvals.get("iterations"), result.llf,
    )
    return LogisticModel(
        feature_names=tuple(X.columns),
        coefficients=result.params.copy(),
        std_errors=result.bse.copy(),
        z_values=result.tvalues.copy(),
        p_values=result.pvalues.copy(),
        nobs=int(result.nobs),
        log_likelihood=float(result.llf),
        aic=float(result.aic),
        iterations=int(retvals.get("iterations", 0)),
    )
