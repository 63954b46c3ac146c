import io
import os
import sys
from dataclasses import fields, is_dataclass
from typing import IO, Any, Dict, Iterator, Optional, Union

from parse import parse

from .errors import ParseError
from .types import Leaf, Node

INDENT = '  '
BRANCH = '┣'
LAST_BRANCH = '┗'

ElementTree = Optional[Node]


def findall(tag: str, root: ElementTree) -> Iterator[Node]:
    if not root:
        return
    for c in root:
        if parse(tag, c.tag, evaluate_result=False):
            yield c


def find(tag: str, root: ElementTree) -> Optional[Node]:
    return next(findall(tag, root), None)


def findpath(path: str, root: ElementTree) -> Optional[Node]:
    path = os.path.normpath(path)
    if not path or path == '.':
        return root
    dirname, basename = os.path.split(path)
    return find(basename, findpath(dirname, root))


def describe(node: Node) -> str:
    """One line summary of given atom: its tag, header fields and leaf payload."""
    line = f'{node.tag} {node.header}'
    if isinstance(node, Leaf):
        line += f': {node.payload}'
    return line


def render(
    result: Union[Node, ParseError, None],
    level: int = 0,
    stream: IO[str] = sys.stdout,
    last: bool = True,
) -> None:
    if result is None:
        return
    if isinstance(result, ParseError):
        print(f'error: {result}', file=stream)
        return
    indent = INDENT * level
    branch = LAST_BRANCH if last else BRANCH
    print(f'{indent}{branch} {describe(result)}', file=stream)
    for idx, c in enumerate(result.children, start=1):
        render(c, level=level + 1, stream=stream, last=idx == len(result.children))


def renders(result: Union[Node, ParseError, None]) -> str:
    with io.StringIO() as stream:
        render(result, stream=stream)
        return stream.getvalue()


def _plain(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {field.name: _plain(getattr(value, field.name)) for field in fields(value)}
    if hasattr(value, '_asdict'):
        return {key: _plain(item) for key, item in value._asdict().items()}
    if isinstance(value, (tuple, list)):
        return [_plain(item) for item in value]
    return value


def to_dict(node: Node) -> Dict[str, Any]:
    """Convert atom tree to plain dicts and lists, e.g. for YAML output."""
    res: Dict[str, Any] = {
        'type': node.tag,
        'size': node.size,
        'location': node.location,
        'header_size': node.header_size,
    }
    if isinstance(node, Leaf):
        res['kind'] = type(node.payload).__name__
        res['fields'] = _plain(node.payload)
    else:
        res['children'] = [to_dict(c) for c in node.children]
    return res
