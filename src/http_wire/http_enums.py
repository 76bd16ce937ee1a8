"""
Protocol enumerations for http_wire.

This module defines the closed sets of protocol versions, request methods
and well-known response statuses, each with an exact bidirectional mapping
to its wire string. Status lines outside the well-known set are represented
by OtherStatus, which is only ever constructed explicitly.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Type, TypeVar, Union

from .exceptions import (
    EncodingError,
    MethodOrStatusNotRecognizedError,
    ParseError,
    VersionNotRecognizedError,
)


WireInput = Union[str, bytes, bytearray, memoryview]

E = TypeVar("E", bound=Enum)


def decode_wire(value: WireInput) -> str:
    """
    Decode a wire token to text.

    Args:
        value: A string or a bytes-like object holding UTF-8 text

    Returns:
        The token as a string

    Raises:
        EncodingError: If the bytes are not valid UTF-8
    """
    if isinstance(value, str):
        return value
    try:
        return bytes(value).decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError("token is not valid UTF-8", cause=e) from e


def _lookup(
    table: Dict[str, E],
    value: WireInput,
    error_cls: Type[ParseError],
    kind: str,
) -> E:
    text = decode_wire(value)
    try:
        return table[text]
    except KeyError:
        raise error_cls(f"unrecognized {kind} {text!r}") from None


class Version(Enum):
    """HTTP protocol versions."""

    HTTP1_0 = "HTTP/1.0"
    HTTP1_1 = "HTTP/1.1"
    HTTP2 = "HTTP/2"

    def __init__(self, wire: str) -> None:
        self._wire_bytes = wire.encode("ascii")

    @property
    def wire(self) -> str:
        """Get the exact wire string."""
        return self.value

    def as_bytes(self) -> bytes:
        """Get the wire string as bytes."""
        return self._wire_bytes

    @classmethod
    def from_wire(cls, value: WireInput) -> "Version":
        """
        Resolve a version from its exact wire string.

        Raises:
            EncodingError: If bytes input is not valid UTF-8
            VersionNotRecognizedError: If the string is not a known version
        """
        return _lookup(_VERSIONS, value, VersionNotRecognizedError, "version")

    def __str__(self) -> str:
        return self.value


class ClientMethod(Enum):
    """Request methods understood by the codec."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"

    def __init__(self, wire: str) -> None:
        self._wire_bytes = wire.encode("ascii")

    @property
    def wire(self) -> str:
        """Get the exact wire string."""
        return self.value

    def as_bytes(self) -> bytes:
        """Get the wire string as bytes."""
        return self._wire_bytes

    @classmethod
    def from_wire(cls, value: WireInput) -> "ClientMethod":
        """
        Resolve a method from its exact wire string.

        Raises:
            EncodingError: If bytes input is not valid UTF-8
            MethodOrStatusNotRecognizedError: If the string is not a known method
        """
        return _lookup(_METHODS, value, MethodOrStatusNotRecognizedError, "method")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OtherStatus:
    """
    Status line outside the well-known set.

    Carries an arbitrary numeric code and a free-text reason phrase and is
    rendered as "<code> <reason>". Parsing never produces this type.
    """

    code: int
    reason: str

    def __post_init__(self) -> None:
        """Validate status data after initialization."""
        if isinstance(self.code, bool) or not isinstance(self.code, int):
            raise ValueError("status code must be int")

        if not 100 <= self.code <= 999:
            raise ValueError("status code must have three digits")

        if not isinstance(self.reason, str):
            raise ValueError("reason must be str")

        if "\r" in self.reason or "\n" in self.reason:
            raise ValueError("reason must not contain line breaks")

    @property
    def wire(self) -> str:
        """Get the rendered status line."""
        return f"{self.code} {self.reason}"

    def as_bytes(self) -> bytes:
        """Get the rendered status line as bytes."""
        return self.wire.encode("utf-8")

    def __str__(self) -> str:
        return self.wire


class ServerStatus(Enum):
    """Well-known response statuses."""

    OK = (200, "OK")
    CREATED = (201, "Created")
    ACCEPTED = (202, "Accepted")
    BAD_REQUEST = (400, "Bad Request")
    UNAUTHORIZED = (401, "Unauthorized")
    FORBIDDEN = (403, "Forbidden")
    NOT_FOUND = (404, "Not Found")
    INTERNAL_SERVER_ERROR = (500, "Internal Server Error")

    def __init__(self, code: int, reason: str) -> None:
        self.code = code
        self.reason = reason
        self._wire = f"{code} {reason}"
        self._wire_bytes = self._wire.encode("ascii")

    @property
    def wire(self) -> str:
        """Get the exact wire string, e.g. "404 Not Found"."""
        return self._wire

    def as_bytes(self) -> bytes:
        """Get the wire string as bytes."""
        return self._wire_bytes

    @classmethod
    def from_wire(cls, value: WireInput) -> "ServerStatus":
        """
        Resolve a well-known status from its exact wire string.

        Only the literals of this enumeration are recognized; an arbitrary
        "<code> <reason>" string is rejected rather than turned into an
        OtherStatus.

        Raises:
            EncodingError: If bytes input is not valid UTF-8
            MethodOrStatusNotRecognizedError: If the string is not a known status
        """
        return _lookup(_STATUSES, value, MethodOrStatusNotRecognizedError, "status")

    @classmethod
    def from_code(cls, code: int, reason: str) -> "Status":
        """
        Build a status from its parts.

        Returns the well-known member when both code and reason match one,
        otherwise an OtherStatus carrying them.
        """
        member = _STATUSES.get(f"{code} {reason}")
        if member is not None:
            return member
        return OtherStatus(code, reason)

    @staticmethod
    def other(code: int, reason: str) -> OtherStatus:
        """Create an open status with an arbitrary code and reason."""
        return OtherStatus(code, reason)

    def __str__(self) -> str:
        return self._wire


Status = Union[ServerStatus, OtherStatus]

_VERSIONS: Dict[str, Version] = {member.wire: member for member in Version}
_METHODS: Dict[str, ClientMethod] = {member.wire: member for member in ClientMethod}
_STATUSES: Dict[str, ServerStatus] = {member.wire: member for member in ServerStatus}
