from dataclasses import dataclass, replace
from typing import Any, TypeVar

from . import header, settings, tree

_SettingT = TypeVar('_SettingT', bound='_DefaultOverride')


@dataclass(frozen=True)
class _DefaultOverride(object):
    def __call__(self: _SettingT, **kwargs: Any) -> _SettingT:
        return replace(self, **kwargs)


@dataclass(frozen=True)
class _AtomPreset(settings._ParseSetting, _DefaultOverride):

    # static pass through
    read_header = staticmethod(header.read_header)
    find = staticmethod(tree.find)
    findall = staticmethod(tree.findall)
    findpath = staticmethod(tree.findpath)
    render = staticmethod(tree.render)
    renders = staticmethod(tree.renders)
    to_dict = staticmethod(tree.to_dict)

    # isort: off
    from .index import (
        classify,
        decode_children,
        parse_file,
        parse_stream,
    )
    # isort: on


qt = _AtomPreset()
