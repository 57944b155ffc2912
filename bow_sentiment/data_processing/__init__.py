"""
Subpackage for turning sentences into features.

- `utils`: text normalisation (lowercase, punctuation, stop-words, stemming)
- `document_term`: vocabulary, document-term matrix and sparse-term pruning
- `features`: labelled feature tables and stratified evaluation splits
"""

__all__ = ["utils", "document_term", "features"]
