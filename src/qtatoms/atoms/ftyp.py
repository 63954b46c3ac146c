import struct
from dataclasses import dataclass
from typing import IO, Tuple

from qtatoms.kernel.buffer import BufferLike, decode_fourcc, splice
from qtatoms.kernel.fields import decoding, read_atom
from qtatoms.kernel.header import AtomHeader
from qtatoms.kernel.registry import REGISTRY
from qtatoms.kernel.structured import StructuredTuple

BRAND_SIZE = 4


@dataclass(frozen=True)
class FileType(object):
    """File type compatibility: the preferred brand and every brand the file conforms to."""

    major_brand: str
    minor_version: int
    compatible_brands: Tuple[str, ...] = ()

    def __str__(self) -> str:
        brands = ','.join(self.compatible_brands)
        return (
            f'major={self.major_brand} minor={self.minor_version}'
            f' compatible=[{brands}]'
        )


def _file_type(major_brand: bytes, minor_version: int) -> FileType:
    return FileType(decode_fourcc(major_brand), minor_version)


FTYP_META = StructuredTuple(
    ('major_brand', 'minor_version'),
    struct.Struct('>4sI'),
    _file_type,
)


def from_bytes(data: BufferLike, offset: int = 0) -> FileType:
    ftyp = FTYP_META.unpack_from(data, offset)
    offset += FTYP_META.size
    count = (len(data) - offset) // BRAND_SIZE
    brands = tuple(
        decode_fourcc(bytes(splice(data, offset + idx * BRAND_SIZE, BRAND_SIZE)))
        for idx in range(count)
    )
    return FileType(ftyp.major_brand, ftyp.minor_version, brands)


@REGISTRY.leaf(b'ftyp')
def decode_ftyp(header: AtomHeader, stream: IO[bytes]) -> FileType:
    data = read_atom(header, stream)
    with decoding(header):
        return from_bytes(data, header.header_size)
