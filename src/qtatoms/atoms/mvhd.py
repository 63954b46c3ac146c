import struct
from dataclasses import dataclass
from typing import IO, NamedTuple, Tuple

from qtatoms.kernel.buffer import BufferLike
from qtatoms.kernel.errors import AtomDecodeError
from qtatoms.kernel.fields import FULL_ATOM, decoding, read_atom
from qtatoms.kernel.header import AtomHeader
from qtatoms.kernel.registry import REGISTRY
from qtatoms.kernel.structured import StructuredTuple

MATRIX = struct.Struct('>9i')


class MovieTiming(NamedTuple):
    creation_time: int
    modification_time: int
    time_scale: int
    duration: int


class MovieProperties(NamedTuple):
    preferred_rate: int
    preferred_volume: int
    matrix: Tuple[int, ...]
    preview_time: int
    preview_duration: int
    poster_time: int
    selection_time: int
    selection_duration: int
    current_time: int
    next_track_id: int


def _movie_properties(matrix: bytes, **fields: int) -> MovieProperties:
    return MovieProperties(matrix=MATRIX.unpack(matrix), **fields)


TIMING_FIELDS = ('creation_time', 'modification_time', 'time_scale', 'duration')

MVHD_TIMING = {
    0: StructuredTuple(TIMING_FIELDS, struct.Struct('>4I'), MovieTiming),
    1: StructuredTuple(TIMING_FIELDS, struct.Struct('>2QIQ'), MovieTiming),
}

MVHD_PROPERTIES = StructuredTuple(
    MovieProperties._fields,
    struct.Struct(f'>IH10x{MATRIX.size}s7I'),
    _movie_properties,
)


@dataclass(frozen=True)
class MovieHeader(object):
    """Characteristics of the movie as a whole

    times are in seconds since midnight, January 1, 1904

    durations are in units of `time_scale` per second

    preferred_rate: 16.16 fixed point, preferred_volume: 8.8 fixed point
    """

    version: int
    flags: int
    timing: MovieTiming
    properties: MovieProperties

    @property
    def rate(self) -> float:
        return self.properties.preferred_rate / 0x10000

    @property
    def volume(self) -> float:
        return self.properties.preferred_volume / 0x100

    @property
    def seconds(self) -> float:
        if not self.timing.time_scale:
            return 0.0
        return self.timing.duration / self.timing.time_scale

    def __str__(self) -> str:
        return (
            f'version={self.version} time_scale={self.timing.time_scale}'
            f' duration={self.timing.duration} rate={self.rate:g}'
            f' volume={self.volume:g} next_track_id={self.properties.next_track_id}'
        )


def from_bytes(type_code: bytes, data: BufferLike, offset: int = 0) -> MovieHeader:
    full = FULL_ATOM.unpack_from(data, offset)
    offset += FULL_ATOM.size
    timing_struct = MVHD_TIMING.get(full.version)
    if timing_struct is None:
        raise AtomDecodeError(type_code, f'unsupported version {full.version}')
    timing = timing_struct.unpack_from(data, offset)
    offset += timing_struct.size
    properties = MVHD_PROPERTIES.unpack_from(data, offset)
    return MovieHeader(full.version, full.flags, timing, properties)


@REGISTRY.leaf(b'mvhd')
def decode_mvhd(header: AtomHeader, stream: IO[bytes]) -> MovieHeader:
    data = read_atom(header, stream)
    with decoding(header):
        return from_bytes(header.type_code, data, header.header_size)
