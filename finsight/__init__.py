"""
FinSight - Source Package

A personal and small-business accounting toolkit: record transactions,
derive summaries and reports, and surface heuristic insights about
cash flow.

DESIGN PRINCIPLES:
1. The transaction list is the single source of truth
2. Everything derived is recomputed from scratch on every change
3. Analytics never raise on valid input - they degrade to neutral results
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "FinSight Team"
