import struct
from dataclasses import dataclass
from typing import IO, Tuple

from qtatoms.kernel.buffer import BufferLike, decode_fourcc
from qtatoms.kernel.errors import AtomDecodeError
from qtatoms.kernel.fields import FULL_ATOM, UINT32BE, decoding, read_atom
from qtatoms.kernel.header import AtomHeader
from qtatoms.kernel.registry import REGISTRY
from qtatoms.kernel.structured import StructuredTuple


@dataclass(frozen=True)
class FeatureEntry(object):
    part_id: int
    feature_code: str
    feature_value: int

    def __str__(self) -> str:
        return (
            f'part_id: {self.part_id:X},'
            f' (code, value): ({self.feature_code}, {self.feature_value})'
        )


def _feature_entry(part_id: int, feature_code: bytes, feature_value: int) -> FeatureEntry:
    return FeatureEntry(part_id, decode_fourcc(feature_code), feature_value)


FEATURE_ENTRY = StructuredTuple(
    ('part_id', 'feature_code', 'feature_value'),
    struct.Struct('>I4sI'),
    _feature_entry,
)


@dataclass(frozen=True)
class FeatureTable(object):
    """Profile: features and their values, for the movie or one of its tracks."""

    version: int
    flags: int
    entries: Tuple[FeatureEntry, ...] = ()

    def __str__(self) -> str:
        return f'version={self.version} flags={self.flags:X} features={len(self.entries)}'


def from_bytes(type_code: bytes, data: BufferLike, offset: int = 0) -> FeatureTable:
    full = FULL_ATOM.unpack_from(data, offset)
    offset += FULL_ATOM.size
    (count,) = UINT32BE.unpack_from(data, offset)
    offset += UINT32BE.size
    available = (len(data) - offset) // FEATURE_ENTRY.size
    if count > available:
        raise AtomDecodeError(
            type_code, f'declares {count} features but only {available} fit'
        )
    entries = tuple(
        FEATURE_ENTRY.unpack_from(data, offset + idx * FEATURE_ENTRY.size)
        for idx in range(count)
    )
    return FeatureTable(full.version, full.flags, entries)


@REGISTRY.leaf(b'prfl')
def decode_prfl(header: AtomHeader, stream: IO[bytes]) -> FeatureTable:
    data = read_atom(header, stream)
    with decoding(header):
        return from_bytes(header.type_code, data, header.header_size)
