from typing import IO, Any, Callable, Dict, FrozenSet, Mapping, Optional, Set

from .buffer import decode_fourcc
from .header import AtomHeader

LeafDecoder = Callable[[AtomHeader, IO[bytes]], Any]


class DuplicateTypeCode(ValueError):
    def __init__(self, type_code: bytes) -> None:
        super().__init__(f'atom type {decode_fourcc(type_code)} is already registered')
        self.type_code = type_code


class InvalidTypeCode(ValueError):
    def __init__(self, type_code: bytes) -> None:
        super().__init__(f'atom type code must be 4 bytes, got {type_code!r}')
        self.type_code = type_code


class AtomRegistry(object):
    """Mapping of 4CC type codes to the way atoms of that type are decoded.

    A type code is either a container, whose payload is a sequence of atoms,
    or a leaf with its own decoder, never both.
    """

    def __init__(self) -> None:
        self._containers: Set[bytes] = set()
        self._leaves: Dict[bytes, LeafDecoder] = {}

    @property
    def containers(self) -> FrozenSet[bytes]:
        return frozenset(self._containers)

    @property
    def leaves(self) -> Mapping[bytes, LeafDecoder]:
        return dict(self._leaves)

    def _claim(self, type_code: bytes) -> None:
        if len(type_code) != 4:
            raise InvalidTypeCode(type_code)
        if type_code in self._containers or type_code in self._leaves:
            raise DuplicateTypeCode(type_code)

    def register_container(self, *type_codes: bytes) -> None:
        for type_code in type_codes:
            self._claim(type_code)
            self._containers.add(type_code)

    def register_leaf(self, type_code: bytes, decoder: LeafDecoder) -> None:
        self._claim(type_code)
        self._leaves[type_code] = decoder

    def leaf(self, *type_codes: bytes) -> Callable[[LeafDecoder], LeafDecoder]:
        """Register decorated function as decoder for given leaf types."""

        def register(decoder: LeafDecoder) -> LeafDecoder:
            for type_code in type_codes:
                self.register_leaf(type_code, decoder)
            return decoder

        return register

    def is_container(self, type_code: bytes) -> bool:
        return type_code in self._containers

    def decoder(self, type_code: bytes) -> Optional[LeafDecoder]:
        return self._leaves.get(type_code)

    def copy(self) -> 'AtomRegistry':
        registry = AtomRegistry()
        registry._containers = set(self._containers)
        registry._leaves = dict(self._leaves)
        return registry


REGISTRY = AtomRegistry()
