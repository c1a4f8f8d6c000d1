"""Query engine package."""

from price_ledger.queries.engine import cheapest, distinct_categories, filter_by_category

__all__ = ["cheapest", "distinct_categories", "filter_by_category"]
