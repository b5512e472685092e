"""
Dialect - special octets used by Reader and Writer.

A default Dialect() is compatible with RFC 4180: comma delimiter, double
quote, CR LF terminator, leading BOM discarded when reading.
"""

import dataclasses
import enum
from dataclasses import dataclass
from typing import Optional, Union

from .errors import CsvValidationError


# UTF-8 encoding of U+FEFF
BOM = b'\xef\xbb\xbf'

CR = 0x0D
LF = 0x0A
DQUOTE = 0x22


class Terminator(enum.Enum):
    """Terminator policies which are not a single octet."""

    # Writer emits CR LF; Reader accepts CR, LF or CR LF.
    CRLF = 'crlf'

    def __repr__(self) -> str:
        return f'{type(self).__name__}.{self.name}'


CRLF = Terminator.CRLF

OctetLike = Union[int, bytes, str]


def _to_octet(name: str, value: OctetLike) -> int:
    """Normalize an int, a 1-byte bytes or a 1-char ASCII str to an octet."""
    if isinstance(value, bool):
        raise CsvValidationError(f"{name} must be a single octet, got {value!r}")

    if isinstance(value, int):
        if not 0 <= value <= 0xFF:
            raise CsvValidationError(
                f"{name} must be in range 0..255, got {value}"
            )
        return value

    if isinstance(value, (bytes, bytearray)):
        if len(value) != 1:
            raise CsvValidationError(
                f"{name} must be a single octet, got {bytes(value)!r} "
                f"(length {len(value)})"
            )
        return value[0]

    if isinstance(value, str):
        if len(value) != 1 or ord(value) > 0x7F:
            raise CsvValidationError(
                f"{name} must be a single ASCII character, got {value!r}. "
                f"Pass an int or bytes for non-ASCII octets."
            )
        return ord(value)

    raise CsvValidationError(
        f"{name} must be an int, bytes or str, got {type(value).__name__}"
    )


@dataclass(frozen=True)
class Dialect:
    """
    Controls the special octets used by Reader and Writer.

    Attributes:
        delimiter: Octet separating fields within a record (default: ',')
        quote: Octet enclosing fields with special characters. Quotes
            inside a quoted field are escaped by doubling. When None,
            Reader treats quotes as ordinary data, but Writer still
            quotes with '"' when necessary.
        terminator: Octet ending records, or CRLF (default). With CRLF,
            Writer always emits CR LF, and Reader accepts CR, LF or CR LF.
        bom: Policy for the UTF-8 byte order mark at stream start.
            None - Reader discards it, Writer emits none.
            True - Reader discards it, Writer emits it once.
            False - Reader keeps it as data of the first field,
            Writer emits none.

    Overlapping octets (e.g. delimiter equal to quote) are accepted;
    parsing such input follows the order of checks in Reader.
    """

    delimiter: OctetLike = ord(',')
    quote: Optional[OctetLike] = DQUOTE
    terminator: Union[OctetLike, Terminator] = CRLF
    bom: Optional[bool] = None

    def __post_init__(self):
        object.__setattr__(self, 'delimiter', _to_octet('delimiter', self.delimiter))

        if self.quote is not None:
            object.__setattr__(self, 'quote', _to_octet('quote', self.quote))

        if not isinstance(self.terminator, Terminator):
            object.__setattr__(
                self, 'terminator', _to_octet('terminator', self.terminator)
            )

        if self.bom is not None and not isinstance(self.bom, bool):
            raise CsvValidationError(
                f"bom must be None, True or False, got {self.bom!r}"
            )

    @property
    def crlf(self) -> bool:
        """Whether records are terminated in CRLF-mode."""
        return self.terminator is CRLF

    @property
    def write_quote(self) -> int:
        """The quote octet used by Writer."""
        return DQUOTE if self.quote is None else self.quote

    def replace(self, **changes) -> 'Dialect':
        """Return a copy of this dialect with the given fields replaced."""
        return dataclasses.replace(self, **changes)


DEFAULT_DIALECT = Dialect()


def make_dialect(dialect: Optional[Dialect] = None, **kwargs) -> Dialect:
    """Resolve the (dialect, **fmtparams) pair accepted by the factories."""
    if dialect is None:
        return Dialect(**kwargs) if kwargs else DEFAULT_DIALECT
    if not isinstance(dialect, Dialect):
        raise CsvValidationError(
            f"dialect must be a Dialect, got {type(dialect).__name__}"
        )
    return dialect.replace(**kwargs) if kwargs else dialect
