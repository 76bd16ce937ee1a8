"""
Custom exceptions for http_wire.

This module defines the exception hierarchy used throughout
the library for error handling and debugging.
"""

from typing import Optional


class HTTPWireError(Exception):
    """Base exception for all http_wire errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ParseError(HTTPWireError):
    """Raised when raw bytes cannot be turned into a message."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Parse error: {message}", cause)


class EncodingError(ParseError):
    """Raised when a byte sequence is not valid UTF-8 text."""


class EmptyInputError(ParseError):
    """Raised when a line or buffer is empty before parsing."""


class MalformedLineError(ParseError):
    """Raised when a header line does not yield a key and a value."""


class MalformedStartLineError(ParseError):
    """Raised when the start line does not have the expected tokens."""


class MethodOrStatusNotRecognizedError(ParseError):
    """Raised when a method or status line is not a known literal."""


class VersionNotRecognizedError(ParseError):
    """Raised when a protocol version is not a known literal."""


class BuilderError(HTTPWireError):
    """Raised when an exhausted builder is used again."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Builder error: {message}", cause)


class ProtocolError(HTTPWireError):
    """Raised when h11 rejects a message or a buffer."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Protocol error: {message}", cause)
