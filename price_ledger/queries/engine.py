"""
Query Engine

Pure functions over records that are already in memory. Nothing here
touches storage; callers load first and pass the sequence in.

GUARANTEES:
- Original order is preserved
- Ties resolve to the earliest record
- An empty input is an empty result, never an error
"""

from typing import Optional, Sequence

from price_ledger.models.record import Record, ascii_casefold


def filter_by_category(records: Sequence[Record], category: str) -> Sequence[Record]:
    """
    Keep records whose category matches, ignoring ASCII case.

    An empty category means "all categories" and returns the input unchanged.
    """
    if not category:
        return records
    return [record for record in records if record.matches_category(category)]


def cheapest(records: Sequence[Record]) -> Optional[Record]:
    """Record with the lowest price; the first one wins a tie. None if empty."""
    best = None
    for record in records:
        if best is None or record.price < best.price:
            best = record
    return best


def distinct_categories(records: Sequence[Record]) -> list[str]:
    """Non-empty categories in first-seen order, deduplicated ignoring ASCII case."""
    seen = set()
    categories = []
    for record in records:
        if not record.category:
            continue
        key = ascii_casefold(record.category)
        if key not in seen:
            seen.add(key)
            categories.append(record.category)
    return categories
