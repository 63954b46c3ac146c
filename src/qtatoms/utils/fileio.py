from contextlib import contextmanager
from typing import IO, Iterator, Tuple

from qtatoms.kernel.errors import SourceIOError
from qtatoms.kernel.stream import check_source_size, stream_size


@contextmanager
def open_source(path: str) -> Iterator[Tuple[IO[bytes], int]]:
    """Open file for reading atoms, yield stream and its size."""
    try:
        res = open(path, 'rb')
    except OSError as exc:
        raise SourceIOError(exc) from exc
    with res:
        yield res, check_source_size(stream_size(res))
