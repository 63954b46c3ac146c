import struct
from typing import IO, NamedTuple, Optional

import deal

from .buffer import decode_fourcc
from .errors import InvalidAtomSize, SourceIOError
from .stream import read_exact, tell
from .structured import StructuredTuple

# provisional size values with special meaning
EXTENDED_SIZE = 1
TO_END = 0

ROOT_TYPE = b'root'


class AtomHeader(NamedTuple):
    """Header of a single atom

    size: total atom length including header

    type_code: raw 4CC type

    location: absolute offset of first header byte

    header_size: 8, 16 for extended size atoms or 0 for the synthetic root
    """

    size: int
    type_code: bytes
    location: int
    header_size: int

    @property
    def tag(self) -> str:
        return decode_fourcc(self.type_code)

    @property
    def end(self) -> int:
        return self.location + self.size

    @property
    def payload_offset(self) -> int:
        return self.location + self.header_size

    @property
    def is_root(self) -> bool:
        return self.header_size == 0

    def __str__(self) -> str:
        return (
            f'size={self.size} location={self.location}'
            f' header_size={self.header_size}'
        )


class _SizeField(NamedTuple):
    size: int
    type_code: bytes


BASIC_HEADER = StructuredTuple(('size', 'type_code'), struct.Struct('>I4s'), _SizeField)
LARGE_SIZE = struct.Struct('>Q')
HEADER_SIZES = frozenset((BASIC_HEADER.size, BASIC_HEADER.size + LARGE_SIZE.size))


@deal.chain(
    deal.ensure(lambda _: _.result.header_size in HEADER_SIZES),
    deal.ensure(lambda _: _.result.size >= _.result.header_size),
    deal.raises(SourceIOError, InvalidAtomSize),
)
def read_header(stream: IO[bytes], limit: Optional[int] = None) -> AtomHeader:
    """Read atom header from current stream position.

    limit: end offset of the enclosing extent,
    used to resolve atoms which declare size 0 (extends to end).

    Stream is left positioned right after the header.
    """
    basic = BASIC_HEADER.unpack(stream)
    size, header_size = basic.size, BASIC_HEADER.size
    if size == EXTENDED_SIZE:
        (size,) = LARGE_SIZE.unpack(read_exact(stream, LARGE_SIZE.size))
        header_size += LARGE_SIZE.size
    location = tell(stream) - header_size
    if size == TO_END and limit is not None:
        size = limit - location
    if size < header_size:
        raise InvalidAtomSize(basic.type_code, size, header_size)
    return AtomHeader(size, basic.type_code, location, header_size)


def root_header(length: int) -> AtomHeader:
    """Create synthetic header for the atom spanning the whole source."""
    return AtomHeader(length, ROOT_TYPE, 0, 0)
