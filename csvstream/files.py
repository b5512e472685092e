"""
Path-based helpers which stream CSV files from and to disk.

Nothing here loads a whole file in memory: records are decoded one at a
time as they are consumed.
"""

import logging
import os
import stat
from pathlib import Path
from typing import List, Optional, Union

from .dialect import Dialect, make_dialect
from .errors import CsvValidationError
from .reader import DEFAULT_CHUNK_SIZE, Reader
from .record import Record
from .writer import Writer

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def validate_path(path: PathLike) -> Path:
    """
    Check that ``path`` names an existing regular file.

    Symlinks are followed; device files, FIFOs, sockets and directories
    are rejected.

    Raises:
        CsvValidationError: If the path cannot be read as a CSV file
    """
    file_path = Path(path)

    if not file_path.exists():
        raise CsvValidationError(f"File not found: {path}")

    real_path = file_path.resolve()

    try:
        mode = real_path.stat().st_mode
    except OSError as e:
        raise CsvValidationError(f"Cannot access file {path}: {e}") from e

    if stat.S_ISBLK(mode) or stat.S_ISCHR(mode):
        raise CsvValidationError(f"Cannot read device file: {path}")
    if stat.S_ISFIFO(mode):
        raise CsvValidationError(f"Cannot read FIFO/pipe: {path}")
    if stat.S_ISSOCK(mode):
        raise CsvValidationError(f"Cannot read socket: {path}")
    if not stat.S_ISREG(mode):
        raise CsvValidationError(f"Path is not a regular file: {path}")

    return real_path


class FileReader:
    """
    Record-by-record iterator over a CSV file.

    Owns both the file and the Record it decodes into; both are released
    by ``close()``, which also runs when leaving a ``with`` block.
    """

    def __init__(
        self,
        path: PathLike,
        dialect: Optional[Dialect] = None,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.path = Path(path)
        self._file = open(self.path, 'rb')
        try:
            self._reader = Reader(self._file, dialect, chunk_size=chunk_size)
        except BaseException:
            self._file.close()
            raise
        self._record = Record()
        self._count = 0
        logger.debug("Opened %s for reading", self.path)

    @property
    def closed(self) -> bool:
        return self._file.closed

    @property
    def record(self) -> Record:
        """The Record holding the most recently read record."""
        return self._record

    @property
    def records_read(self) -> int:
        return self._count

    @property
    def line_no(self) -> int:
        return self._reader.line_no

    def next(self) -> Optional[List[bytes]]:
        """Return the fields of the next record, or None at end of file."""
        if self.closed:
            raise ValueError("I/O operation on closed FileReader")
        if not self._reader.next_record(self._record):
            return None
        self._count += 1
        return self._record.fields()

    def close(self):
        if self.closed:
            return
        self._record.release()
        self._file.close()
        logger.debug("Closed %s after %d records", self.path, self._count)

    def __iter__(self) -> 'FileReader':
        return self

    def __next__(self) -> List[bytes]:
        fields = self.next()
        if fields is None:
            raise StopIteration
        return fields

    def __enter__(self) -> 'FileReader':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False


class FileWriter(Writer):
    """A Writer owning the file it writes to."""

    def __init__(self, path: PathLike, dialect: Optional[Dialect] = None, *, append: bool = False):
        self.path = Path(path)
        self._file = open(self.path, 'ab' if append else 'wb')
        super().__init__(self._file, dialect)
        # Appending to a non-empty file never starts the stream
        if append and self._file.tell() > 0:
            self._needs_bom = False
        logger.debug("Opened %s for writing", self.path)

    @property
    def closed(self) -> bool:
        return self._file.closed

    def flush(self):
        self._file.flush()

    def close(self):
        if self.closed:
            return
        self._file.close()
        logger.debug("Closed %s", self.path)

    def __enter__(self) -> 'FileWriter':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False


def open_reader(
    path: PathLike,
    dialect: Optional[Dialect] = None,
    *,
    validate: bool = True,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    **kwargs,
) -> FileReader:
    """
    Open a CSV file for record-by-record iteration.

    Args:
        path: Path to the CSV file
        dialect: Dialect to decode with (default: RFC 4180)
        validate: If True (default), reject anything but regular files.
        chunk_size: Octets read from the file at a time
        **kwargs: Dialect fields overriding ``dialect``

    Returns:
        FileReader usable in for-loops or as a context manager.

    Raises:
        CsvValidationError: If path validation fails

    Example:
        >>> with csvstream.open_reader('data.csv') as records:
        ...     for fields in records:
        ...         print(records.record.line_no, fields)
    """
    if validate:
        path = validate_path(path)
    return FileReader(path, make_dialect(dialect, **kwargs), chunk_size=chunk_size)


def open_writer(
    path: PathLike,
    dialect: Optional[Dialect] = None,
    *,
    append: bool = False,
    **kwargs,
) -> FileWriter:
    """
    Open a CSV file for writing, truncating it unless ``append`` is set.

    Example:
        >>> with csvstream.open_writer('out.csv', bom=True) as w:
        ...     w.write_record([b'id', b'name'])
    """
    return FileWriter(path, make_dialect(dialect, **kwargs), append=append)


def count_records(
    path: PathLike,
    dialect: Optional[Dialect] = None,
    *,
    validate: bool = True,
    **kwargs,
) -> int:
    """
    Count the records of a CSV file.

    Unlike counting newlines, this honours quoted fields spanning several
    lines and a final record without a terminator.
    """
    with open_reader(path, dialect, validate=validate, **kwargs) as records:
        for _ in records:
            pass
        return records.records_read
