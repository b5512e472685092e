"""Tests for csvstream.Dialect."""

import dataclasses

import pytest

import csvstream
from csvstream import CRLF, DEFAULT_DIALECT, Dialect
from csvstream.dialect import make_dialect
from csvstream.writer import escape_triggers


class TestDefaults:
    """Tests for the default RFC 4180 dialect."""

    def test_defaults(self):
        """Test the default values."""
        d = Dialect()
        assert d.delimiter == ord(",")
        assert d.quote == ord('"')
        assert d.terminator is CRLF
        assert d.bom is None
        assert d.crlf

    def test_default_dialect(self):
        """Test that DEFAULT_DIALECT equals a fresh Dialect."""
        assert DEFAULT_DIALECT == Dialect()

    def test_frozen(self):
        """Test that dialects cannot be modified."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_DIALECT.delimiter = ord(";")

    def test_replace(self):
        """Test that replace() returns a modified copy."""
        d = DEFAULT_DIALECT.replace(delimiter=";", bom=True)
        assert d.delimiter == ord(";")
        assert d.bom is True
        assert d.quote == ord('"')
        assert DEFAULT_DIALECT.delimiter == ord(",")


class TestNormalization:
    """Tests for the accepted ways of giving an octet."""

    @pytest.mark.parametrize("value", [ord("|"), b"|", bytearray(b"|"), "|"])
    def test_octet_forms(self, value):
        """Test int, bytes and str octets."""
        d = Dialect(delimiter=value, quote=value, terminator=value)
        assert d.delimiter == d.quote == d.terminator == ord("|")
        assert not d.crlf

    def test_quote_none(self):
        """Test that quote=None is kept, and the writer quote falls back."""
        d = Dialect(quote=None)
        assert d.quote is None
        assert d.write_quote == ord('"')

    def test_high_octets(self):
        """Test octets outside ASCII given as int or bytes."""
        d = Dialect(delimiter=0xFF, quote=b"\x80")
        assert d.delimiter == 0xFF
        assert d.quote == 0x80

    def test_overlapping_octets_accepted(self):
        """Test that colliding octets are not a construction error."""
        d = Dialect(delimiter=",", quote=",", terminator=",")
        assert d.delimiter == d.quote == d.terminator

    @pytest.mark.parametrize("value", [
        "",
        ",,",
        "é",
        b"",
        b",,",
        256,
        -1,
        True,
        1.0,
    ])
    def test_invalid_delimiter(self, value):
        """Test error for values which are not a single octet."""
        with pytest.raises(csvstream.CsvValidationError):
            Dialect(delimiter=value)

    def test_invalid_quote(self):
        """Test error for a multi-character quote."""
        with pytest.raises(ValueError):
            Dialect(quote='""')

    def test_invalid_terminator(self):
        """Test error for a multi-octet terminator."""
        with pytest.raises(csvstream.CsvValidationError):
            Dialect(terminator=b"\r\n")

    @pytest.mark.parametrize("bom", ["yes", 1, 0])
    def test_invalid_bom(self, bom):
        """Test error for a bom which is not None or a bool."""
        with pytest.raises(csvstream.CsvValidationError):
            Dialect(bom=bom)


class TestMakeDialect:
    """Tests for resolving factory arguments."""

    def test_none(self):
        """Test that no arguments give the default dialect."""
        assert make_dialect() is DEFAULT_DIALECT

    def test_kwargs(self):
        """Test building a dialect from keyword arguments."""
        assert make_dialect(delimiter=";") == Dialect(delimiter=";")

    def test_override(self):
        """Test overriding fields of a given dialect."""
        base = Dialect(delimiter="|")
        assert make_dialect(base) is base
        assert make_dialect(base, bom=True) == Dialect(delimiter="|", bom=True)

    def test_not_a_dialect(self):
        """Test error for a dialect of the wrong type."""
        with pytest.raises(csvstream.CsvValidationError):
            make_dialect("excel")


class TestEscapeTriggers:
    """Tests for the octets which force quoting."""

    def test_default(self):
        """Test the default trigger set."""
        assert set(escape_triggers(Dialect())) == {b",", b'"', b"\r", b"\n"}

    def test_octet_terminator(self):
        """Test a custom terminator replacing CR and LF."""
        triggers = escape_triggers(Dialect(delimiter="|", quote=None, terminator="#"))
        assert set(triggers) == {b"|", b'"', b"#"}

    def test_deduplicated(self):
        """Test that colliding octets appear once."""
        assert escape_triggers(Dialect(delimiter="\n", terminator="\n")) == (b"\n", b'"')
