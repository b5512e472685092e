"""
csvstream - streaming RFC 4180 CSV reader and writer for byte streams

Records are decoded from any object with a ``read(size)`` method and
encoded to any object with a ``write(data)`` method. Fields are raw bytes;
no text encoding is assumed.
"""

import logging

from .dialect import (
    BOM,
    CRLF,
    DEFAULT_DIALECT,
    Dialect,
    Terminator,
)
from .errors import (
    CsvError,
    CsvUsageError,
    CsvValidationError,
)
from .files import (
    FileReader,
    FileWriter,
    count_records,
    open_reader,
    open_writer,
)
from .reader import DEFAULT_CHUNK_SIZE, ByteSource, Reader, State, reader
from .record import Record
from .writer import ByteSink, Writer, writer

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = '0.1.0'
__all__ = [
    'BOM',
    'CRLF',
    'DEFAULT_CHUNK_SIZE',
    'DEFAULT_DIALECT',
    'ByteSink',
    'ByteSource',
    'CsvError',
    'CsvUsageError',
    'CsvValidationError',
    'Dialect',
    'FileReader',
    'FileWriter',
    'Reader',
    'Record',
    'State',
    'Terminator',
    'Writer',
    'count_records',
    'open_reader',
    'open_writer',
    'reader',
    'writer',
]
