"""
Price Ledger - Source Package

A small local ledger of product prices backed by a single CSV file.

DESIGN PRINCIPLES:
1. The file on disk is the only state
2. Tolerant reader, strict writer
3. Every mutation rewrites the whole file in the canonical layout
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Price Ledger Team"
