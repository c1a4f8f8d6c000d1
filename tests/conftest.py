"""Shared fixtures for the Price Ledger test suite."""

from decimal import Decimal

import pytest

from price_ledger.models.record import Record
from price_ledger.services.storage import CsvRecordStore


FIXED_TIMESTAMP = "2024-05-01T12:00:00+00:00"


def make_record(
    product: str = "Oat milk",
    category: str = "dairy",
    price: str = "1.99",
    url: str = "https://shop.example/oat-milk",
    timestamp: str = FIXED_TIMESTAMP,
) -> Record:
    return Record(
        product=product,
        category=category,
        price=Decimal(price),
        url=url,
        timestamp=timestamp,
    )


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "prices.csv"


@pytest.fixture
def store(store_path):
    return CsvRecordStore(store_path)
