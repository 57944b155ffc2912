"""
Coefficient tables for fitted sentiment models.

Instead of a formatted text summary, this module returns the estimates,
their standard errors, z statistics and p-values as a DataFrame, with
the usual significance codes attached so strongly predictive terms
can be filtered programmatically.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from ..classification.text_classifier import LogisticModel
from ..utils.file_io import write_csv

# (upper p-value bound, code), checked in order
SIGNIFICANCE_CODES = (
    (0.001, "***"),
    (0.01, "**"),
    (0.05, "*"),
    (0.1, "."),
)


def significance_code(p_value: float) -> str:
    if np.isnan(p_value):
        return ""
    for bound, code in SIGNIFICANCE_CODES:
        if p_value < bound:
            return code
    return ""


@dataclass(frozen=True)
class CoefficientSummary:
    table: pd.DataFrame
    nobs: int
    log_likelihood: float
    aic: float

    def significant(self, alpha: float = 0.05) -> pd.DataFrame:
        """Rows whose p-value is below *alpha*."""
        return self.table[self.table["p_value"] < alpha]


def summarise_coefficients(model: LogisticModel) -> CoefficientSummary:
    """Tabulate the coefficients of *model*, intercept first."""
    table = pd.DataFrame(
        {
            "term": model.coefficients.index,
            "estimate": model.coefficients.to_numpy(),
            "std_error": model.std_errors.to_numpy(),
            "z_value": model.z_values.to_numpy(),
            "p_value": model.p_values.to_numpy(),
        }
    )
    table["significance"] = table["p_value"].map(significance_code)
    return CoefficientSummary(
        table=table,
        nobs=model.nobs,
        log_likelihood=model.log_likelihood,
        aic=model.aic,
    )


def write_coefficient_summary(summary: CoefficientSummary, path) -> Path:
    """Save the coefficient table as CSV."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    write_csv(summary.table, path)
    logging.info("Wrote %d coefficients to %s", len(summary.table), path)
    return path
