"""
Writer - encodes CSV records to a byte stream.
"""

from typing import Iterable, Optional, Protocol, Tuple, Union

from .dialect import BOM, CR, LF, Dialect, make_dialect
from .errors import CsvUsageError, CsvValidationError

FieldLike = Union[bytes, bytearray, memoryview]


class ByteSink(Protocol):
    """Anything with a blocking ``write(data)`` accepting bytes."""

    def write(self, data: bytes):
        ...


def escape_triggers(dialect: Dialect) -> Tuple[bytes, ...]:
    """Return the octets which force a field to be quoted under ``dialect``."""
    octets = [dialect.delimiter, dialect.write_quote]
    if dialect.crlf:
        octets += [CR, LF]
    else:
        octets.append(dialect.terminator)
    # One-byte bytes objects, so that ``trigger in field`` is a substring test
    return tuple(bytes((o,)) for o in dict.fromkeys(octets))


class Writer:
    """
    Writes RFC 4180 CSV to a byte stream.

    Fields containing the delimiter, the quote or a terminator octet are
    enclosed in quotes, with inner quotes doubled. All other fields are
    written verbatim. Delimiter, quote and terminator are configurable
    through Dialect; with ``quote=None`` the writer falls back to '"'.

    Errors raised by the stream propagate unchanged. Flushing and closing
    the stream is up to the caller.

    Example:
        >>> out = io.BytesIO()
        >>> w = Writer(out)
        >>> w.write_record([b'foo', b'bar, baz'])
        >>> out.getvalue()
        b'foo,"bar, baz"\\r\\n'
    """

    def __init__(self, stream: ByteSink, dialect: Optional[Dialect] = None):
        self._stream = stream
        self._dialect = make_dialect(dialect)

        self._needs_bom = bool(self._dialect.bom)
        self._needs_delimiter = False

        self._delimiter = bytes((self._dialect.delimiter,))
        self._quote = bytes((self._dialect.write_quote,))
        self._doubled_quote = self._quote * 2
        self._terminator = (
            b'\r\n' if self._dialect.crlf else bytes((self._dialect.terminator,))
        )
        self._triggers = escape_triggers(self._dialect)

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def in_record(self) -> bool:
        """Whether a record was started with write_field() and not terminated."""
        return self._needs_delimiter

    def needs_escaping(self, field: bytes) -> bool:
        """Whether ``field`` has to be quoted."""
        return any(t in field for t in self._triggers)

    def write_field(self, field: FieldLike):
        """
        Write a single field of the current record.

        ``terminate_record()`` must be called once all fields of the
        record have been written.
        """
        if not isinstance(field, (bytes, bytearray, memoryview)):
            raise CsvValidationError(
                f"Fields must be bytes-like, got {type(field).__name__}"
            )
        field = bytes(field)

        if self._needs_bom:
            self._stream.write(BOM)
            self._needs_bom = False

        if self._needs_delimiter:
            self._stream.write(self._delimiter)
        self._needs_delimiter = True

        if self.needs_escaping(field):
            escaped = field.replace(self._quote, self._doubled_quote)
            self._stream.write(self._quote + escaped + self._quote)
        else:
            self._stream.write(field)

    def terminate_record(self):
        """Write the record terminator."""
        self._needs_delimiter = False
        self._stream.write(self._terminator)

    def write_record(self, fields: Iterable[FieldLike]):
        """
        Write all ``fields`` as one record, followed by the terminator.

        All fields are checked before anything is written, so an invalid
        field leaves the stream untouched.

        Raises:
            CsvUsageError: If a record started with write_field() has not
                been terminated yet.
            CsvValidationError: If a field is not bytes-like.
        """
        if self._needs_delimiter:
            raise CsvUsageError(
                "write_record() called without terminating the previous record"
            )
        fields = list(fields)
        for i, field in enumerate(fields):
            if not isinstance(field, (bytes, bytearray, memoryview)):
                raise CsvValidationError(
                    f"Field {i} must be bytes-like, got {type(field).__name__}"
                )
        for field in fields:
            self.write_field(field)
        self.terminate_record()

    def write_records(self, records: Iterable[Iterable[FieldLike]]) -> int:
        """Write each item of ``records`` as a record. Returns the record count."""
        count = 0
        for fields in records:
            self.write_record(fields)
            count += 1
        return count


def writer(stream: ByteSink, dialect: Optional[Dialect] = None, **kwargs) -> Writer:
    """
    Return a Writer over ``stream``.

    Extra keyword arguments (delimiter, quote, terminator, bom) override
    the corresponding fields of ``dialect``.
    """
    return Writer(stream, make_dialect(dialect, **kwargs))
