"""Exceptions raised while reading or writing sound banks."""

from __future__ import annotations


class BnkError(Exception):
    """Base class for sound bank errors."""


class MissingDidxError(BnkError):
    """A DATA section was met before any DIDX section."""

    def __init__(self) -> None:
        super().__init__("Accessing DATA section before DIDX section.")


class UnknownEventActionScopeError(BnkError):
    """An event action carries a scope value that is not known."""

    def __init__(self, offset: int, value: int) -> None:
        self.offset = offset
        self.value = value
        super().__init__(f"Unknown EventActionScope at offset {offset}: {value}")


class BadDataSizeError(BnkError):
    """A structure did not consume exactly the number of bytes it declared."""

    def __init__(self, name: str, expected: int, got: int, start: int) -> None:
        self.name = name
        self.expected = expected
        self.got = got
        self.start = start
        super().__init__(
            f"Incorrect data size for {name}: expected {expected}, got {got}. "
            f"Section start: {start}"
        )


class FormatAssertionError(BnkError):
    """A consistency check in the bank data failed."""

    def __init__(self, position: int, message: str) -> None:
        self.position = position
        self.message = message
        super().__init__(f"Assertion failed at offset {position}: {message}")