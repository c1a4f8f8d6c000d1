"""Tests for the CSV file store against real files in tmp_path."""

import pytest
from decimal import Decimal

from price_ledger.services.storage import (
    CsvRecordStore,
    RecordIndexError,
    StoreDecodeError,
    StoreReadError,
    StoreWriteError,
)
from tests.conftest import make_record


HEADER_LINE = "product,category,price,url,timestamp\n"


class TestEnsureExists:
    """Tests for lazy creation."""

    def test_creates_header_only_file(self, store, store_path):
        """Test that a missing store is created with just the header."""
        assert store.ensure_exists() is True
        assert store_path.read_text(encoding="utf-8") == HEADER_LINE

    def test_is_idempotent(self, store, store_path):
        """Test that an existing file is left alone."""
        store_path.write_text(HEADER_LINE + "Tea,drinks,3.10,u,t\n", encoding="utf-8")
        assert store.ensure_exists() is False
        assert store_path.read_text(encoding="utf-8").endswith("Tea,drinks,3.10,u,t\n")

    def test_creates_parent_directories(self, tmp_path):
        """Test that a nested store path works on first use."""
        store = CsvRecordStore(tmp_path / "data" / "ledger" / "prices.csv")
        assert store.load_all() == []
        assert store.path.exists()

    def test_uncreatable_path_raises_write_error(self, tmp_path):
        """Test that a path below a regular file cannot be created."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        with pytest.raises(StoreWriteError):
            CsvRecordStore(blocker / "prices.csv").ensure_exists()


class TestLoadAll:
    """Tests for load_all()."""

    def test_fresh_store_is_empty(self, store):
        """Test that a freshly created store lists nothing."""
        assert store.load_all() == []

    def test_reads_legacy_file(self, store, store_path):
        """Test that a 4-column file is readable without migration."""
        store_path.write_text(
            "product,price,url,timestamp\nBread,2.5,u,t\n", encoding="utf-8"
        )
        [record] = store.load_all()
        assert record.category == ""
        assert record.price == Decimal("2.50")

    def test_bom_is_ignored(self, store, store_path):
        """Test files saved by spreadsheet tools with a UTF-8 BOM."""
        store_path.write_text("\ufeff" + HEADER_LINE + "Tea,drinks,3.10,u,t\n", encoding="utf-8")
        [record] = store.load_all()
        assert record.product == "Tea"

    def test_directory_in_place_of_file_raises_read_error(self, store_path):
        """Test that an unopenable store is a read error."""
        store_path.mkdir()
        with pytest.raises(StoreReadError):
            CsvRecordStore(store_path).load_all()

    def test_invalid_utf8_raises_read_error(self, store, store_path):
        """Test that undecodable bytes are a read error."""
        store_path.write_bytes(HEADER_LINE.encode() + b"\xff\xfe\xfa,x,1,u,t\n")
        with pytest.raises(StoreReadError):
            store.load_all()

    def test_broken_quoting_propagates(self, store, store_path):
        """Test that tokenization failures reach the caller."""
        store_path.write_text(HEADER_LINE + '"Bad"x,a,1,u,t\n', encoding="utf-8")
        with pytest.raises(StoreDecodeError):
            store.load_all()


class TestAppend:
    """Tests for append()."""

    def test_append_preserves_order(self, store):
        """Test that R1 then R2 reads back as [R1, R2]."""
        r1 = make_record(product="First")
        r2 = make_record(product="Second")
        assert store.append(r1) == 0
        assert store.append(r2) == 1
        assert store.load_all() == [r1, r2]

    def test_duplicates_are_kept(self, store):
        """Test that identical records are not merged."""
        record = make_record()
        store.append(record)
        store.append(record)
        assert store.load_all() == [record, record]

    def test_long_field_stays_readable(self, store):
        """Test that a very long cell does not lock the store."""
        url = "https://x.example/" + "a" * 200_000
        store.append(make_record(url=url))
        store.append(make_record(product="Next"))

        records = store.load_all()
        assert records[0].url == url
        assert store.delete_at(0).url == url
        assert [r.product for r in store.load_all()] == ["Next"]

    def test_carriage_return_survives_rewrites(self, store):
        """Test that a bare '\\r' in a cell keeps the row intact across writes."""
        record = make_record(product="a\rb")
        store.append(record)
        store.append(make_record(product="Second"))
        store.delete_at(1)
        assert store.load_all() == [record]

    def test_append_upgrades_legacy_file(self, store, store_path):
        """Test that one write rewrites every row in the canonical layout."""
        store_path.write_text(
            "product,price,url,timestamp\nBread,2.5,u,t\nMilk,abc,u2,t2\n",
            encoding="utf-8",
        )
        store.append(make_record(product="Tea", category="drinks", price="3.1", url="u3", timestamp="t3"))
        assert store_path.read_text(encoding="utf-8") == (
            HEADER_LINE
            + "Bread,,2.50,u,t\n"
            + "Milk,,0.00,u2,t2\n"
            + "Tea,drinks,3.10,u3,t3\n"
        )


class TestReplaceAll:
    """Tests for replace_all()."""

    def test_replace_all_overwrites(self, store):
        """Test that the whole content is replaced."""
        store.append(make_record(product="Old"))
        new = [make_record(product="New A"), make_record(product="New B")]
        store.replace_all(new)
        assert store.load_all() == new

    def test_replace_all_with_nothing_leaves_header(self, store, store_path):
        """Test that an empty replacement keeps a valid store."""
        store.append(make_record())
        store.replace_all([])
        assert store_path.read_text(encoding="utf-8") == HEADER_LINE

    def test_atomic_writes_produce_identical_file(self, tmp_path):
        """Test that the temp-file strategy writes the same bytes."""
        records = [make_record(product="A"), make_record(product="B, quoted")]
        plain = CsvRecordStore(tmp_path / "plain.csv")
        atomic = CsvRecordStore(tmp_path / "atomic.csv", atomic_writes=True)
        plain.replace_all(records)
        atomic.replace_all(records)

        assert (tmp_path / "plain.csv").read_bytes() == (tmp_path / "atomic.csv").read_bytes()
        assert sorted(p.name for p in tmp_path.iterdir()) == ["atomic.csv", "plain.csv"]


class TestDeleteAt:
    """Tests for delete_at()."""

    def test_delete_middle(self, store):
        """Test deleting index 1 from [R0, R1, R2]."""
        r0, r1, r2 = (make_record(product=name) for name in ("R0", "R1", "R2"))
        for record in (r0, r1, r2):
            store.append(record)

        assert store.delete_at(1) == r1
        assert store.load_all() == [r0, r2]

    @pytest.mark.parametrize("index", [3, 10, -1])
    def test_out_of_range_leaves_store_unchanged(self, store, store_path, index):
        """Test that a bad position raises and does not touch the file."""
        for name in ("R0", "R1", "R2"):
            store.append(make_record(product=name))
        before = store_path.read_bytes()

        with pytest.raises(RecordIndexError):
            store.delete_at(index)

        assert store_path.read_bytes() == before

    def test_index_error_is_builtin_index_error(self, store):
        """Test that callers can catch the builtin IndexError."""
        with pytest.raises(IndexError) as exc_info:
            store.delete_at(0)
        assert exc_info.value.length == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
