import logging
from dataclasses import dataclass
from typing import Optional

from qtatoms.atoms import REGISTRY

from .registry import AtomRegistry


@dataclass(frozen=True)
class _ParseSetting(object):
    """Setting for decoding atom trees

    registry: AtomRegistry (default: all known atom types) -
        which type codes are containers and how leaves are decoded

    strict: if set to True, failure to decode a child atom is raised,
        otherwise the child is skipped with a logged warning

    max_depth: limit levels of nested containers, None for unlimited

    logger: where skipped atoms are reported
    """

    registry: AtomRegistry = REGISTRY
    strict: bool = False
    max_depth: Optional[int] = 64
    logger: logging.Logger = logging.root
