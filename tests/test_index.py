import io
import logging
import struct

import pytest

from builders import atom, ftyp, mvhd, sample_movie
from qtatoms.kernel.errors import (
    AtomDecodeError,
    InvalidSourceSize,
    SourceIOError,
)
from qtatoms.kernel.header import read_header
from qtatoms.kernel.preset import qt
from qtatoms.kernel.registry import REGISTRY, DuplicateTypeCode, InvalidTypeCode
from qtatoms.kernel.types import Container, Leaf, Unknown


def parse(data, **kwargs):
    return qt(**kwargs).parse_stream(io.BytesIO(data))


def tags(node):
    return [c.tag for c in node]


def walk(node):
    yield node
    for c in node:
        yield from walk(c)


def test_root_wraps_whole_source():
    data = sample_movie()
    root = parse(data)
    assert isinstance(root, Container)
    assert root.tag == 'root'
    assert (root.location, root.header_size, root.size) == (0, 0, len(data))
    assert tags(root) == ['ftyp', 'moov', 'free']
    assert tags(qt.find('moov', root)) == ['mvhd']


def test_children_stay_inside_parent():
    trak = atom(b'trak', atom(b'tkhd', bytes(84)) + atom(b'mdia', atom(b'mdhd', bytes(24))))
    root = parse(ftyp() + atom(b'moov', mvhd() + trak + trak) + atom(b'mdat', bytes(40)))
    for node in walk(root):
        for c in node.children:
            assert c.header.end <= node.header.end
    assert tags(qt.findpath('moov', root)) == ['mvhd', 'trak', 'trak']
    assert tags(qt.findpath('moov/trak/mdia', root)) == ['mdhd']


def test_unknown_atom_is_kept():
    root = parse(atom(b'zzzz', b'abc'))
    (leaf,) = root.children
    assert isinstance(leaf, Leaf)
    assert leaf.payload == Unknown()
    assert (leaf.tag, leaf.size, leaf.location, leaf.header_size) == ('zzzz', 11, 0, 8)


def test_malformed_child_is_skipped(caplog):
    broken_ftyp = atom(b'ftyp', b'isom')
    broken_mvhd = atom(b'mvhd', bytes(12))
    data = atom(b'moov', atom(b'free') + broken_ftyp + mvhd() + broken_mvhd + atom(b'skip'))
    with caplog.at_level(logging.WARNING):
        root = parse(data)
    assert tags(qt.find('moov', root)) == ['free', 'mvhd', 'skip']
    assert 'skipping ftyp at offset 16' in caplog.text


def test_strict_raises_on_malformed_child():
    data = atom(b'moov', atom(b'free') + atom(b'ftyp', b'isom'))
    with pytest.raises(AtomDecodeError) as exc_info:
        parse(data, strict=True)
    assert exc_info.value.type_code == b'ftyp'
    assert exc_info.value.path == ('root', 'moov')


def test_parse_twice_gives_same_tree():
    data = sample_movie()
    first, second = parse(data), parse(data)
    assert first == second
    assert qt.to_dict(first) == qt.to_dict(second)


def test_empty_container():
    root = parse(atom(b'moov') + atom(b'free'))
    moov = root.children[0]
    assert isinstance(moov, Container)
    assert moov.children == ()

    stream = io.BytesIO(atom(b'moov'))
    header = read_header(stream)
    assert list(qt.decode_children(header, stream)) == []


def test_source_too_small():
    with pytest.raises(InvalidSourceSize) as exc_info:
        parse(b'\0\0\0\x08')
    assert exc_info.value.size == 4


def test_file_too_small(tmp_path):
    path = tmp_path / 'tiny.mp4'
    path.write_bytes(b'\0\0\0\x08')
    with pytest.raises(InvalidSourceSize):
        qt.parse_file(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(SourceIOError) as exc_info:
        qt.parse_file(str(tmp_path / 'missing.mp4'))
    assert isinstance(exc_info.value.error, FileNotFoundError)


def test_parse_file(tmp_path):
    path = tmp_path / 'movie.mp4'
    path.write_bytes(sample_movie())
    assert qt.parse_file(str(path)) == parse(sample_movie())


def test_child_past_parent_end_stops_enumeration(caplog):
    overflowing = struct.pack('>I4s', 100, b'free')
    data = atom(b'moov', atom(b'free') + overflowing) + ftyp()
    with caplog.at_level(logging.WARNING):
        root = parse(data)
    assert tags(root) == ['moov', 'ftyp']
    assert tags(root.children[0]) == ['free']
    assert 'stopped reading moov children' in caplog.text


def test_trailing_bytes_in_container_are_ignored():
    root = parse(atom(b'moov', mvhd() + bytes(4)) + atom(b'free'))
    assert tags(root) == ['moov', 'free']
    assert tags(root.children[0]) == ['mvhd']


def test_size_zero_extends_to_parent_end():
    data = ftyp() + b'\0\0\0\0mdat' + bytes(32)
    root = parse(data)
    mdat = root.children[-1]
    assert mdat.tag == 'mdat'
    assert mdat.location + mdat.size == len(data)


def test_extended_size_atom():
    root = parse(atom(b'mdat', bytes(10), extended=True) + atom(b'free'))
    mdat, free = root.children
    assert (mdat.header_size, mdat.size) == (16, 26)
    assert free.location == 26


def test_nesting_limit():
    data = atom(b'moov', atom(b'moov', atom(b'moov')))
    root = parse(data, max_depth=1)
    assert tags(root) == ['moov']
    assert tags(root.children[0]) == []
    assert tags(parse(data).children[0].children[0]) == ['moov']


def test_registry_types_are_disjoint():
    assert not REGISTRY.containers & set(REGISTRY.leaves)
    assert b'moov' in REGISTRY.containers
    assert {b'ftyp', b'mvhd', b'prfl', b'free', b'mdat'} <= set(REGISTRY.leaves)


def test_registry_refuses_duplicates():
    registry = REGISTRY.copy()
    with pytest.raises(DuplicateTypeCode):
        registry.register_container(b'ftyp')
    with pytest.raises(DuplicateTypeCode):
        registry.register_leaf(b'moov', lambda header, stream: None)
    with pytest.raises(InvalidTypeCode):
        registry.register_container(b'toolong')


def test_custom_registry():
    registry = REGISTRY.copy()
    registry.register_container(b'udta')

    @registry.leaf(b'zzzz')
    def decode_zzzz(header, stream):
        return header.size - header.header_size

    data = atom(b'udta', atom(b'zzzz', b'abcd'))
    root = parse(data, registry=registry)
    assert qt.findpath('udta/zzzz', root).payload == 4
    assert b'udta' not in REGISTRY.containers
    assert isinstance(parse(data).children[0].payload, Unknown)
