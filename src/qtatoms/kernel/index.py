from contextlib import contextmanager
from typing import IO, Iterator, Optional, cast

from qtatoms.utils.fileio import open_source

from .errors import AtomDecodeError, AtomOutOfBounds, NotAContainer, ParseError
from .header import AtomHeader, read_header, root_header
from .settings import _ParseSetting
from .stream import MIN_SOURCE_SIZE, check_source_size, seek, stream_size
from .types import Container, Leaf, Node, Unknown


@contextmanager
def exception_path_context(header: AtomHeader) -> Iterator[None]:
    """Prefix path of atoms which failed to decode with enclosing atom tag."""
    try:
        yield
    except ParseError as exc:
        path = getattr(exc, 'path', ())
        exc.path = (header.tag, *path)  # type: ignore
        raise exc


def classify(
    cfg: _ParseSetting, header: AtomHeader, stream: IO[bytes], level: int = 0
) -> Node:
    """Decode atom of given header as container if known as one, otherwise as leaf."""
    try:
        return decode_container(cfg, header, stream, level=level)
    except NotAContainer:
        return decode_leaf(cfg, header, stream)


def decode_container(
    cfg: _ParseSetting, header: AtomHeader, stream: IO[bytes], level: int = 0
) -> Container:
    if not (header.is_root or cfg.registry.is_container(header.type_code)):
        raise NotAContainer(header.type_code)
    if cfg.max_depth is not None and level > cfg.max_depth:
        raise AtomDecodeError(
            header.type_code, f'containers nested deeper than {cfg.max_depth} levels'
        )
    return Container(header, tuple(decode_children(cfg, header, stream, level=level)))


def decode_leaf(cfg: _ParseSetting, header: AtomHeader, stream: IO[bytes]) -> Leaf:
    decoder = cfg.registry.decoder(header.type_code)
    if decoder is None:
        return Leaf(header, Unknown())
    return Leaf(header, decoder(header, stream))


def decode_children(
    cfg: _ParseSetting, header: AtomHeader, stream: IO[bytes], level: int = 0
) -> Iterator[Node]:
    """Decode all atoms contained in the payload of given container header."""
    offset = seek(stream, header.payload_offset)
    while offset < header.end:
        if header.end - offset < MIN_SOURCE_SIZE:
            cfg.logger.warning(
                f'ignoring {header.end - offset} trailing bytes'
                f' in {header.tag} at offset {offset}'
            )
            return
        try:
            with exception_path_context(header):
                child = read_header(stream, limit=header.end)
                if child.end > header.end:
                    raise AtomOutOfBounds(child.type_code, child.end, header.end)
        except ParseError as exc:
            if cfg.strict:
                raise exc
            cfg.logger.warning(f'stopped reading {header.tag} children: {exc}')
            return
        cfg.logger.debug(f'reading {child.tag} at offset {child.location}')
        try:
            with exception_path_context(header):
                node = classify(cfg, child, stream, level=level + 1)
        except ParseError as exc:
            if cfg.strict:
                raise exc
            cfg.logger.warning(f'skipping {child.tag} at offset {child.location}: {exc}')
        else:
            yield node
        offset = seek(stream, child.end)


def parse_stream(
    cfg: _ParseSetting, stream: IO[bytes], size: Optional[int] = None
) -> Container:
    """Decode the atom tree of given stream, wrapped in a synthetic root atom."""
    size = stream_size(stream) if size is None else size
    check_source_size(size)
    return cast(Container, classify(cfg, root_header(size), stream))


def parse_file(cfg: _ParseSetting, path: str) -> Container:
    with open_source(path) as (stream, size):
        return parse_stream(cfg, stream, size=size)
