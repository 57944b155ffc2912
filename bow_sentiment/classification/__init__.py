"""
Subpackage for supervised sentiment classification.

The `text_classifier` module fits a binomial logistic regression to a
feature table and turns predicted probabilities into labels.
"""

__all__ = ["text_classifier"]
