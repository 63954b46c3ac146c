from dataclasses import dataclass
from typing import IO

from qtatoms.kernel.header import AtomHeader
from qtatoms.kernel.registry import REGISTRY

PURPOSES = {
    b'free': 'free space',
    b'skip': 'free space',
    b'wide': 'reserved space for extended size',
    b'mdat': 'media data',
}


@dataclass(frozen=True)
class Placeholder(object):
    """Atom occupying a byte range, whose payload is not interpreted."""

    purpose: str

    def __str__(self) -> str:
        return self.purpose


@REGISTRY.leaf(*PURPOSES)
def decode_placeholder(header: AtomHeader, stream: IO[bytes]) -> Placeholder:
    return Placeholder(PURPOSES[header.type_code])
