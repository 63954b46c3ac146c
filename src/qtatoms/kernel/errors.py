from typing import Union


def format_type(type_code: Union[bytes, str]) -> str:
    if isinstance(type_code, str):
        return type_code
    return type_code.decode('latin-1')


class ParseError(Exception):
    """Base for every failure raised while decoding an atom tree."""


class SourceIOError(ParseError):
    def __init__(self, error: Union[OSError, EOFError]) -> None:
        super().__init__(str(error))
        self.error = error


class InvalidSourceSize(ParseError):
    def __init__(self, size: int, minimum: int) -> None:
        super().__init__(
            f'source of {size} bytes is too small, expected at least {minimum} bytes'
        )
        self.size = size
        self.minimum = minimum


class InvalidAtomSize(ParseError):
    def __init__(self, type_code: bytes, size: int, header_size: int) -> None:
        super().__init__(
            f'atom {format_type(type_code)} declares size {size}'
            f' which is smaller than its {header_size} byte header'
        )
        self.type_code = type_code
        self.size = size
        self.header_size = header_size


class AtomDecodeError(ParseError):
    def __init__(self, type_code: bytes, reason: str = '') -> None:
        message = f'failed to decode atom {format_type(type_code)}'
        super().__init__(f'{message}: {reason}' if reason else message)
        self.type_code = type_code
        self.reason = reason


class ShortAtomRead(ParseError):
    def __init__(self, type_code: bytes, declared: int, actual: int) -> None:
        super().__init__(
            f'failed to read atom {format_type(type_code)}:'
            f' declared {declared} bytes but got {actual}'
        )
        self.type_code = type_code
        self.declared = declared
        self.actual = actual


class NotAContainer(ParseError):
    def __init__(self, type_code: bytes) -> None:
        super().__init__(f'{format_type(type_code)} is not a container atom')
        self.type_code = type_code


class AtomOutOfBounds(ParseError):
    def __init__(self, type_code: bytes, end: int, limit: int) -> None:
        super().__init__(
            f'atom {format_type(type_code)} ends at offset {end}'
            f' past the end of its parent at offset {limit}'
        )
        self.type_code = type_code
        self.end = end
        self.limit = limit
