import io
from contextlib import contextmanager
from typing import IO, Iterator

import deal

from .errors import InvalidSourceSize, SourceIOError

# size of the smallest atom header: uint32_be size (4) + 4CC type (4)
MIN_SOURCE_SIZE = 8


@contextmanager
def keep_position(stream: IO[bytes]) -> Iterator[None]:
    pos = stream.tell()
    yield
    stream.seek(pos, io.SEEK_SET)
    assert stream.tell() == pos


def stream_size(stream: IO[bytes]) -> int:
    try:
        with keep_position(stream):
            return stream.seek(0, io.SEEK_END)
    except OSError as exc:
        raise SourceIOError(exc) from exc


def seek(stream: IO[bytes], offset: int) -> int:
    try:
        return stream.seek(offset, io.SEEK_SET)
    except OSError as exc:
        raise SourceIOError(exc) from exc


def tell(stream: IO[bytes]) -> int:
    try:
        return stream.tell()
    except OSError as exc:
        raise SourceIOError(exc) from exc


def read_exact(stream: IO[bytes], size: int) -> bytes:
    """Read exactly `size` bytes from stream, a short read is an error."""
    try:
        data = stream.read(size)
    except OSError as exc:
        raise SourceIOError(exc) from exc
    if len(data) != size:
        raise SourceIOError(
            EOFError(f'got EOF while reading: expected {size} bytes, got {len(data)}')
        )
    return data


@deal.chain(
    deal.pre(lambda _: _.size >= 0),
    deal.raises(InvalidSourceSize),
    deal.reason(InvalidSourceSize, lambda _: _.size < MIN_SOURCE_SIZE),
    deal.has(),
)
def check_source_size(size: int) -> int:
    if size < MIN_SOURCE_SIZE:
        raise InvalidSourceSize(size, MIN_SOURCE_SIZE)
    return size
