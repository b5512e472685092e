"""
Reader - decodes CSV records from a byte stream.
"""

import enum
import logging
from typing import List, Optional, Protocol

from .dialect import BOM, CR, LF, Dialect, make_dialect
from .errors import CsvValidationError
from .record import Record

logger = logging.getLogger(__name__)

# Octets requested from the source per read
DEFAULT_CHUNK_SIZE = 64 * 1024


class ByteSource(Protocol):
    """Anything with a blocking ``read(size)`` returning b'' at end of stream."""

    def read(self, size: int = -1) -> bytes:
        ...


class State(enum.IntEnum):
    BEFORE_RECORD = 0
    BEFORE_FIELD = 1
    IN_FIELD = 2
    IN_QUOTED_FIELD = 3
    QUOTE_IN_QUOTED = 4
    EAT_LF = 5
    EAT_BOM_1 = 6
    EAT_BOM_2 = 7
    EAT_BOM_3 = 8


BEFORE_RECORD = State.BEFORE_RECORD
BEFORE_FIELD = State.BEFORE_FIELD
IN_FIELD = State.IN_FIELD
IN_QUOTED_FIELD = State.IN_QUOTED_FIELD
QUOTE_IN_QUOTED = State.QUOTE_IN_QUOTED
EAT_LF = State.EAT_LF
EAT_BOM_1 = State.EAT_BOM_1
EAT_BOM_2 = State.EAT_BOM_2
EAT_BOM_3 = State.EAT_BOM_3


class Reader:
    """
    Parses RFC 4180 CSV from a byte stream, one record per call.

    The parser deviates from the RFC in the following ways:

    1. Unquoted fields may contain any octets other than the delimiter,
       the quote and the terminator.
    2. A field may be a concatenation of quoted and unquoted data:
       ``"foo"bar`` parses as ``foobar``.
    3. A quote inside an unquoted field is kept as data, so
       ``"Foo ""Bar"" Baz"`` and ``Foo "Bar" Baz`` parse the same.
    4. A leading UTF-8 BOM may be discarded, see ``Dialect.bom``.
    5. Delimiter, quote and terminator are configurable through Dialect.

    Errors raised by the stream propagate unchanged and leave the reader
    in an undefined state.

    Example:
        >>> with open('data.csv', 'rb') as f, Record() as record:
        ...     r = Reader(f)
        ...     while r.next_record(record):
        ...         print(record.line_no, record.fields())
    """

    def __init__(
        self,
        stream: ByteSource,
        dialect: Optional[Dialect] = None,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size < 1:
            raise CsvValidationError(
                f"chunk_size must be a positive integer, got {chunk_size!r}"
            )

        self._stream = stream
        self._dialect = make_dialect(dialect)
        self._chunk_size = chunk_size

        self._state = BEFORE_RECORD if self._dialect.bom is False else EAT_BOM_1
        self._line_no = 1
        self._seen_cr = False

        self._buf = b''
        self._pos = 0

        # Backs iteration; next_record() callers bring their own
        self._record: Optional[Record] = None

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def line_no(self) -> int:
        """Physical line the reader is currently on (1-based)."""
        return self._line_no

    @property
    def state(self) -> State:
        return self._state

    def __iter__(self) -> 'Reader':
        return self

    def __next__(self) -> List[bytes]:
        if self._record is None:
            self._record = Record()
        if not self.next_record(self._record):
            self._record.release()
            self._record = None
            raise StopIteration
        return self._record.fields()

    def next_record(self, record: Record) -> bool:
        """
        Read the next record into ``record``.

        Returns True if a record was read, or False once the stream is
        exhausted. A final record without a terminator is still returned.
        """
        record.line_no = self._line_no
        record.clear()

        delimiter = self._dialect.delimiter
        quote = self._dialect.quote
        crlf = self._dialect.crlf
        terminator = None if crlf else self._dialect.terminator

        state = self._state
        line_no = self._line_no
        seen_cr = self._seen_cr
        buf = self._buf
        pos = self._pos
        end = len(buf)

        while True:
            if pos >= end:
                self._state = state
                self._line_no = line_no
                self._seen_cr = seen_cr
                if not self._fill():
                    return self._end_of_stream(record)
                buf = self._buf
                pos = 0
                end = len(buf)

            b = buf[pos]
            pos += 1

            if b == CR:
                line_no += 1
                seen_cr = True
            elif b == LF and not seen_cr:
                line_no += 1
            else:
                seen_cr = False

            # States which may hand the octet over to BEFORE_RECORD/IN_FIELD
            if state == EAT_BOM_1:
                if b == 0xEF:
                    state = EAT_BOM_2
                    continue
                state = BEFORE_RECORD
            elif state == EAT_BOM_2:
                if b == 0xBB:
                    state = EAT_BOM_3
                    continue
                record.append_bytes(BOM[:1])
                state = IN_FIELD
            elif state == EAT_BOM_3:
                if b == 0xBF:
                    logger.debug("Discarded byte order mark")
                    state = BEFORE_RECORD
                    continue
                record.append_bytes(BOM[:2])
                state = IN_FIELD
            elif state == EAT_LF:
                if b == LF:
                    continue
                state = BEFORE_RECORD

            if state == BEFORE_RECORD or state == BEFORE_FIELD:
                if b == quote:
                    state = IN_QUOTED_FIELD
                    continue
                state = IN_FIELD
            elif state == QUOTE_IN_QUOTED:
                if b == quote:
                    record.append_byte(b)
                    state = IN_QUOTED_FIELD
                    continue
                state = IN_FIELD
            elif state == IN_QUOTED_FIELD:
                if b == quote:
                    state = QUOTE_IN_QUOTED
                else:
                    record.append_byte(b)
                continue

            # IN_FIELD
            if b == delimiter:
                record.push_field()
                state = BEFORE_FIELD
                continue

            if (b == CR or b == LF) if crlf else b == terminator:
                record.push_field()
                self._state = EAT_LF if crlf and b == CR else BEFORE_RECORD
                self._line_no = line_no
                self._seen_cr = seen_cr
                self._pos = pos
                return True

            record.append_byte(b)

    def _fill(self) -> bool:
        """Pull the next chunk from the stream. Returns False at end of stream."""
        data = self._stream.read(self._chunk_size)
        if not data:
            self._buf = b''
            self._pos = 0
            return False
        self._buf = data
        self._pos = 0
        return True

    def _end_of_stream(self, record: Record) -> bool:
        state = self._state
        if state in (BEFORE_RECORD, EAT_LF, EAT_BOM_1):
            return False

        # A truncated BOM is data, like any other octets
        if state == EAT_BOM_2:
            record.append_bytes(BOM[:1])
        elif state == EAT_BOM_3:
            record.append_bytes(BOM[:2])

        logger.debug("Record at line %d has no terminator", record.line_no)
        self._state = BEFORE_RECORD
        record.push_field()
        return True


def reader(
    stream: ByteSource,
    dialect: Optional[Dialect] = None,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    **kwargs,
) -> Reader:
    """
    Return a Reader over ``stream``.

    Extra keyword arguments (delimiter, quote, terminator, bom) override
    the corresponding fields of ``dialect``.

    Example:
        >>> import io, csvstream
        >>> list(csvstream.reader(io.BytesIO(b'a;b\\n1;2'), delimiter=';'))
        [[b'a', b'b'], [b'1', b'2']]
    """
    return Reader(stream, make_dialect(dialect, **kwargs), chunk_size=chunk_size)
