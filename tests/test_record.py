"""Tests for csvstream.Record."""

import pytest

import csvstream
from csvstream import Record


def make_record(*fields):
    record = Record()
    for f in fields:
        record.append_bytes(f)
        record.push_field()
    return record


class TestBuilding:
    """Tests for filling a record."""

    def test_new_record_is_empty(self):
        """Test a fresh record."""
        record = Record()
        assert len(record) == 0
        assert record.field_count() == 0
        assert record.fields() == []
        assert record.line_no == 0

    def test_push_field_without_data(self):
        """Test that push_field() alone adds an empty field."""
        record = Record()
        record.push_field()
        assert record.fields() == [b""]

    def test_append(self):
        """Test append_byte() and append_bytes()."""
        record = Record()
        record.append_byte(ord("a"))
        record.append_bytes(b"bc")
        record.push_field()
        record.append_byte(0xFF)
        record.push_field()
        assert record.fields() == [b"abc", b"\xff"]

    def test_incomplete_field_hidden(self):
        """Test that a field being built is not visible."""
        record = Record()
        record.append_bytes(b"partial")
        assert record.field_count() == 0
        assert record.field_or_none(0) is None


class TestAccess:
    """Tests for reading fields."""

    def test_field(self):
        """Test field() and indexing."""
        record = make_record(b"a", b"b")
        assert record.field(1) == b"b"
        assert record[0] == b"a"
        assert record[-1] == b"b"

    @pytest.mark.parametrize("idx", [2, 5, -1])
    def test_field_out_of_range(self, idx):
        """Test that field() rejects indices beyond the complete fields."""
        record = make_record(b"a", b"b")
        with pytest.raises(IndexError):
            record.field(idx)

    def test_negative_index_out_of_range(self):
        """Test indexing past the start."""
        with pytest.raises(IndexError):
            make_record(b"a")[-2]

    def test_field_or_none(self):
        """Test field_or_none() never raising."""
        record = make_record(b"a")
        assert record.field_or_none(0) == b"a"
        assert record.field_or_none(1) is None
        assert record.field_or_none(-1) is None

    def test_fields_are_copies(self):
        """Test that returned fields survive reuse of the record."""
        record = make_record(b"keep")
        kept = record.field(0)
        record.clear()
        record.append_bytes(b"other")
        record.push_field()
        assert kept == b"keep"
        assert record.field(0) == b"other"

    def test_iteration_and_equality(self):
        """Test iterating and comparing records."""
        record = make_record(b"a", b"b")
        assert list(record) == [b"a", b"b"]
        assert record == [b"a", b"b"]
        assert record == (b"a", bytearray(b"b"))
        assert record == make_record(b"a", b"b")
        assert record != [b"a"]

    def test_repr(self):
        """Test the representation."""
        assert repr(make_record(b"a")) == "Record(line_no=0, fields=[b'a'])"


class TestReuse:
    """Tests for clear() and buffer retention."""

    def test_clear(self):
        """Test that clear() resets the field count but keeps buffers."""
        record = make_record(b"a", b"b", b"c")
        assert record.capacity == 3

        record.clear()
        assert record.field_count() == 0
        assert record.capacity == 3

        record.append_bytes(b"x")
        record.push_field()
        assert record.fields() == [b"x"]
        assert record.field_or_none(1) is None
        assert record.capacity == 3

    def test_clear_twice(self):
        """Test that clear() is idempotent."""
        record = make_record(b"a")
        record.clear()
        record.clear()
        assert len(record) == 0

    def test_growth(self):
        """Test that capacity only grows when more fields are needed."""
        record = make_record(b"a")
        record.clear()
        for f in (b"1", b"2"):
            record.append_bytes(f)
            record.push_field()
        assert record.capacity == 2


class TestRelease:
    """Tests for releasing a record."""

    def test_release(self):
        """Test that release() drops the buffers."""
        record = make_record(b"a", b"b")
        record.release()
        assert record.released
        assert record.capacity == 0
        assert len(record) == 0

    def test_context_manager(self):
        """Test that leaving a with block releases the record."""
        with Record() as record:
            record.push_field()
        assert record.released

    def test_context_manager_on_error(self):
        """Test that the record is released when the block raises."""
        with pytest.raises(KeyError):
            with Record() as record:
                raise KeyError("boom")
        assert record.released

    def test_use_after_release(self):
        """Test that a released record cannot be refilled."""
        record = Record()
        record.release()
        with pytest.raises(csvstream.CsvUsageError):
            record.clear()
        with pytest.raises(csvstream.CsvUsageError):
            record.push_field()
