from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional, Sequence, Tuple, Union

from .header import AtomHeader


@dataclass(frozen=True)
class Unknown(object):
    """Payload of atoms with unrecognized type, only the header is kept."""

    def __str__(self) -> str:
        return 'unknown'


@dataclass(frozen=True)
class _AtomNode(object):
    header: AtomHeader

    @property
    def tag(self) -> str:
        return self.header.tag

    @property
    def size(self) -> int:
        return self.header.size

    @property
    def location(self) -> int:
        return self.header.location

    @property
    def header_size(self) -> int:
        return self.header.header_size

    def __iter__(self) -> Iterator['Node']:
        return iter(self.children)


@dataclass(frozen=True)
class Container(_AtomNode):
    """Atom holding a sequence of nested atoms

    header: atom header

    children: contained atoms, in file order
    """

    children: Tuple['Node', ...] = ()

    def __repr__(self) -> str:
        children = ','.join(_format_children(self, max_show=4))
        return f'Container<{self.tag}>[{self.header}, children={{{children}}}]'


@dataclass(frozen=True)
class Leaf(_AtomNode):
    """Atom with type specific payload

    header: atom header

    payload: decoded fields, `Unknown` when type is not recognized
    """

    payload: Any = Unknown()

    @property
    def children(self) -> Sequence['Node']:
        return ()

    def __repr__(self) -> str:
        return f'Leaf<{self.tag}>[{self.header}, {self.payload!r}]'


Node = Union[Container, Leaf]


def _format_children(
    root: Iterable[Node],
    max_show: Optional[int] = None,
) -> Iterator[str]:
    counts = Counter(child.tag for child in root)
    for idx, (tag, count) in enumerate(counts.items()):
        if not (max_show is None or idx < max_show):
            yield '...'
            return
        yield f'{tag}*{count}' if count > 1 else tag
