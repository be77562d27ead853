"""
ClauseCheck - verifies that contract amendments were incorporated into
counterparty copies, clause by clause, against a reference contract.

Similarity is purely character based; findings still need a lawyer's eye.
"""

from .parsing import segment
from .comparison import compare, classify

__version__ = "0.1.0"
__author__ = "ClauseCheck Team"

__all__ = ["segment", "compare", "classify"]
