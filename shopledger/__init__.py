"""
Shop Ledger - Source Package

A bookkeeping backend for small shops: profit/expense transactions,
summaries over date ranges, sale billing, and an LLM assistant that
answers questions from the shop's own numbers.

DESIGN PRINCIPLES:
1. Every transaction belongs to exactly one user
2. Owners act only on their own records
3. Totals are always recomputed from live data
4. The assistant only sees a bounded summary of the ledger
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Shop Ledger Team"
