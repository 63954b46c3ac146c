from qtatoms.kernel.registry import REGISTRY

from . import containers, ftyp, mvhd, placeholder, prfl

__all__ = ['REGISTRY', 'containers', 'ftyp', 'mvhd', 'placeholder', 'prfl']
