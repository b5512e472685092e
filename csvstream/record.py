"""
Record - a reusable container for the fields of a single CSV record.
"""

from typing import Iterator, List, Optional

from .errors import CsvUsageError


class Record:
    """
    A single record read from a CSV stream.

    Internally a Record is a list of bytearray buffers. Only the first
    ``field_count()`` buffers hold valid ("complete") fields; the rest are
    kept to be refilled by the next read instead of being reallocated.

    Fields are returned as ``bytes`` copies, so they stay valid after the
    record is reused:

        >>> record = Record()
        >>> while reader.next_record(record):
        ...     for i in range(len(record)):
        ...         print(record.field(i))

    Use a ``with`` block (or call ``release()``) to drop the buffers.
    """

    __slots__ = ('line_no', '_buffers', '_complete', '_released')

    def __init__(self):
        # First physical line of the record in the source. For records
        # spanning several lines, the line the record starts on.
        self.line_no: int = 0
        self._buffers: List[bytearray] = []
        self._complete = 0
        self._released = False

    def __repr__(self) -> str:
        return f'Record(line_no={self.line_no}, fields={self.fields()!r})'

    def __enter__(self) -> 'Record':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.release()
        return False

    def __len__(self) -> int:
        return self._complete

    def __getitem__(self, idx: int) -> bytes:
        if idx < 0:
            idx += self._complete
        return self.field(idx)

    def __iter__(self) -> Iterator[bytes]:
        for i in range(self._complete):
            yield bytes(self._buffers[i])

    def __eq__(self, other) -> bool:
        if isinstance(other, Record):
            return self.fields() == other.fields()
        if isinstance(other, (list, tuple)):
            return self.fields() == [bytes(f) for f in other]
        return NotImplemented

    __hash__ = None

    @property
    def released(self) -> bool:
        """Whether ``release()`` has been called."""
        return self._released

    @property
    def capacity(self) -> int:
        """Number of field buffers held, complete or not."""
        return len(self._buffers)

    def field_count(self) -> int:
        """Return the number of complete fields."""
        return self._complete

    def field(self, i: int) -> bytes:
        """Return the i-th complete field. Raises IndexError when out of range."""
        if not 0 <= i < self._complete:
            raise IndexError(
                f"Field index {i} out of range (record has {self._complete} fields)"
            )
        return bytes(self._buffers[i])

    def field_or_none(self, i: int) -> Optional[bytes]:
        """Return the i-th complete field, or None if there is no such field."""
        if 0 <= i < self._complete:
            return bytes(self._buffers[i])
        return None

    def fields(self) -> List[bytes]:
        """Return all complete fields."""
        return [bytes(b) for b in self._buffers[:self._complete]]

    def clear(self):
        """Forget all fields, keeping the buffers for reuse."""
        self._check_usable()
        self._complete = 0
        for buf in self._buffers:
            buf.clear()

    def release(self):
        """Drop all buffers. The record cannot be filled afterwards."""
        self._buffers = []
        self._complete = 0
        self._released = True

    def push_field(self):
        """
        Mark the field being built as complete.

        If no field is being built, an empty field is added, so that a
        record always has at least one field.
        """
        self._current()
        self._complete += 1

    def append_byte(self, b: int):
        """Append one octet to the field being built."""
        self._current().append(b)

    def append_bytes(self, data: bytes):
        """Append octets to the field being built."""
        self._current().extend(data)

    def _current(self) -> bytearray:
        """Return the field being built, allocating its buffer if needed."""
        if len(self._buffers) == self._complete:
            self._check_usable()
            self._buffers.append(bytearray())
        return self._buffers[self._complete]

    def _check_usable(self):
        if self._released:
            raise CsvUsageError("Record has been released")
