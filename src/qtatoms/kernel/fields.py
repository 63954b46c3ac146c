import struct
from contextlib import contextmanager
from typing import IO, Iterator, NamedTuple

from .buffer import UnexpectedBufferSize
from .errors import AtomDecodeError, ShortAtomRead, SourceIOError
from .header import AtomHeader
from .stream import seek
from .structured import StructuredTuple

UINT32BE = struct.Struct('>I')


class FullAtom(NamedTuple):
    version: int
    flags: int


def _full_atom(version: int, flags: bytes) -> FullAtom:
    return FullAtom(version, int.from_bytes(flags, byteorder='big'))


# 1 byte version + 3 bytes flags, preceding the payload of "full" atoms
FULL_ATOM = StructuredTuple(('version', 'flags'), struct.Struct('>B3s'), _full_atom)


def read_atom(header: AtomHeader, stream: IO[bytes]) -> bytes:
    """Read complete atom bytes (header + payload) from given stream."""
    seek(stream, header.location)
    try:
        data = stream.read(header.size)
    except OSError as exc:
        raise SourceIOError(exc) from exc
    if len(data) != header.size:
        raise ShortAtomRead(header.type_code, header.size, len(data))
    return data


@contextmanager
def decoding(header: AtomHeader) -> Iterator[None]:
    """Report layout mismatches inside the block as failure to decode given atom."""
    try:
        yield
    except (struct.error, UnexpectedBufferSize) as exc:
        raise AtomDecodeError(header.type_code, str(exc)) from exc
