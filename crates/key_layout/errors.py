"""Errors raised while loading key layout map files."""

from typing import Optional


class KeyLayoutError(Exception):
    """Base class for key layout map load failures."""

    def __init__(self, message: str, filename: Optional[str] = None,
                 location: Optional[str] = None):
        super().__init__(message)
        self.filename = filename
        self.location = location


class LayoutIOError(KeyLayoutError):
    """The layout file could not be opened or decoded."""

    def __init__(self, message: str, filename: str, errno: Optional[int] = None):
        super().__init__(message, filename=filename)
        self.errno = errno


class LayoutParseError(KeyLayoutError):
    """A problem with a specific line of the file."""

    def __init__(self, message: str, location: str, token: str = "",
                 filename: Optional[str] = None):
        super().__init__(message, filename=filename, location=location)
        self.token = token


class LayoutSyntaxError(LayoutParseError):
    """A malformed token or directive."""


class UnknownSymbolError(LayoutParseError):
    """A label that is not in its symbol table."""


class DuplicateEntryError(LayoutParseError):
    """A code, flag or kernel config registered twice."""


class UnsupportedConfigError(KeyLayoutError):
    """The file parsed but the running kernel lacks a required config."""

    def __init__(self, message: str, filename: str, missing: list[str]):
        super().__init__(message, filename=filename)
        self.missing = missing


class KernelConfigError(RuntimeError):
    """The kernel configuration could not be read at all."""
