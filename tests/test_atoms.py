import io
import struct

import pytest

from builders import IDENTITY_MATRIX, atom, ftyp, mvhd, prfl
from qtatoms.atoms.ftyp import FileType, decode_ftyp
from qtatoms.atoms.mvhd import decode_mvhd
from qtatoms.atoms.placeholder import Placeholder, decode_placeholder
from qtatoms.atoms.prfl import FeatureEntry, decode_prfl
from qtatoms.kernel.errors import AtomDecodeError, ShortAtomRead
from qtatoms.kernel.fields import read_atom
from qtatoms.kernel.header import AtomHeader, read_header


def decode(decoder, data):
    stream = io.BytesIO(data)
    return decoder(read_header(stream), stream)


def test_ftyp():
    data = bytes.fromhex('00000014 66747970 69736F6D 00000200 69736F32')
    assert decode(decode_ftyp, data) == FileType('isom', 512, ('iso2',))


def test_ftyp_without_compatible_brands():
    ftyp_atom = decode(decode_ftyp, ftyp(b'qt  ', 0x20050300, brands=()))
    assert ftyp_atom == FileType('qt  ', 0x20050300, ())
    assert str(ftyp_atom) == 'major=qt   minor=537199360 compatible=[]'


def test_ftyp_ignores_partial_trailing_brand():
    ftyp_atom = decode(decode_ftyp, atom(b'ftyp', b'isom\0\0\0\x01iso2mp41av'))
    assert ftyp_atom.compatible_brands == ('iso2', 'mp41')


def test_ftyp_too_short():
    with pytest.raises(AtomDecodeError) as exc_info:
        decode(decode_ftyp, atom(b'ftyp', b'isom') + bytes(8))
    assert exc_info.value.type_code == b'ftyp'


def test_ftyp_short_read():
    with pytest.raises(ShortAtomRead) as exc_info:
        decode(decode_ftyp, struct.pack('>I4s', 40, b'ftyp') + bytes(12))
    assert exc_info.value.type_code == b'ftyp'
    assert exc_info.value.declared == 40
    assert exc_info.value.actual == 20


def test_read_atom_includes_header():
    data = atom(b'zzzz', b'payload', extended=True)
    stream = io.BytesIO(bytes(3) + data)
    header = AtomHeader(len(data), b'zzzz', 3, 16)
    assert read_atom(header, stream) == data


@pytest.mark.parametrize(
    'type_code, purpose',
    [
        (b'free', 'free space'),
        (b'skip', 'free space'),
        (b'wide', 'reserved space for extended size'),
        (b'mdat', 'media data'),
    ],
)
def test_placeholder_reads_nothing(type_code, purpose):
    header = AtomHeader(1 << 32, type_code, 1024, 16)
    assert decode_placeholder(header, io.BytesIO()) == Placeholder(purpose)


def test_mvhd():
    movie = decode(decode_mvhd, mvhd(time_scale=600, duration=1500, next_track_id=3))
    assert (movie.version, movie.flags) == (0, 0)
    assert movie.timing.creation_time == 1
    assert movie.timing.modification_time == 2
    assert movie.timing.time_scale == 600
    assert movie.timing.duration == 1500
    assert movie.properties.matrix == IDENTITY_MATRIX
    assert movie.properties.next_track_id == 3
    assert movie.rate == 1.0
    assert movie.volume == 1.0
    assert movie.seconds == 2.5
    assert str(movie) == (
        'version=0 time_scale=600 duration=1500 rate=1 volume=1 next_track_id=3'
    )


def test_mvhd_version_1():
    movie = decode(decode_mvhd, mvhd(version=1, time_scale=1000, duration=1 << 33))
    assert movie.version == 1
    assert movie.timing.duration == 1 << 33
    assert movie.properties.next_track_id == 2


def test_mvhd_unsupported_version():
    with pytest.raises(AtomDecodeError, match='unsupported version 2'):
        decode(decode_mvhd, mvhd(version=2))


def test_mvhd_truncated():
    data = mvhd()[:-4]
    data = struct.pack('>I', len(data)) + data[4:]
    with pytest.raises(AtomDecodeError):
        decode(decode_mvhd, data)


def test_prfl():
    table = decode(decode_prfl, prfl([(1, b'vers', 3), (0x10002, b'bitr', 4000)]))
    assert (table.version, table.flags) == (0, 0)
    assert table.entries == (
        FeatureEntry(1, 'vers', 3),
        FeatureEntry(0x10002, 'bitr', 4000),
    )
    assert str(table.entries[1]) == 'part_id: 10002, (code, value): (bitr, 4000)'
    assert str(table) == 'version=0 flags=0 features=2'


def test_prfl_count_exceeds_atom():
    with pytest.raises(AtomDecodeError, match='declares 3 features'):
        decode(decode_prfl, prfl([(1, b'vers', 3)], count=3))
