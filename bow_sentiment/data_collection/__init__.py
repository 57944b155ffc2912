"""
Subpackage for reading raw sentences.

The `loader` module parses tab-separated training and test files into
immutable sentence records and assembles them into a corpus.
"""

__all__ = ["loader"]
