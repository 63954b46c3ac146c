from qtatoms.kernel.registry import REGISTRY

CONTAINERS = (
    b'moov',  # movie
    b'trak',  # track
    b'edts',  # edit
    b'mdia',  # media
    b'minf',  # media information
    b'dinf',  # data information
    b'stbl',  # sample table
    b'mvex',  # movie extends
    b'moof',  # movie fragment
    b'traf',  # track fragment
    b'mfra',  # movie fragment random access
)

REGISTRY.register_container(*CONTAINERS)
