"""
HTTP primitives for http_wire.

This module defines the message model: the Message record shared by both
directions, the ClientMessage and ServerMessage wrappers that add the
request method/resource or the response status, and the fluent builders
used to assemble them. Messages are frozen; changes create new instances.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from typing_extensions import Self

from .exceptions import BuilderError, ParseError
from .headers import HeaderCollection, HeaderLine
from .http_enums import ClientMethod, OtherStatus, ServerStatus, Status, Version

logger = logging.getLogger(__name__)

BodyLike = Union[bytes, bytearray, memoryview, str]


def to_body(body: BodyLike) -> bytes:
    """Convert a body-like value to bytes, encoding text as UTF-8."""
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    raise ValueError("body must be bytes-like or str")


def normalize_resource(resource: str) -> str:
    """Prepend "/" to a resource that does not start with one."""
    if resource.startswith("/"):
        return resource
    return f"/{resource}"


@dataclass(frozen=True)
class Message:
    """
    Version, headers and body shared by requests and responses.

    The header collection is owned by the message and may be mutated in
    place; the version and body are replaced through the with_* methods.
    Every with_* method gives the new message its own copy of the headers.
    """

    version: Version = Version.HTTP1_1
    headers: HeaderCollection = field(default_factory=HeaderCollection)
    body: bytes = b""

    def __post_init__(self) -> None:
        """Validate message data after initialization."""
        if not isinstance(self.version, Version):
            raise ValueError("version must be a Version")

        if not isinstance(self.headers, HeaderCollection):
            raise ValueError("headers must be a HeaderCollection")

        if not isinstance(self.body, bytes):
            raise ValueError("body must be bytes")

    def copy(self) -> "Message":
        """Create an equal message with its own header collection."""
        return Message(version=self.version, headers=self.headers.copy(), body=self.body)

    def with_version(self, version: Version) -> "Message":
        """Create a new message with a different version."""
        return Message(version=version, headers=self.headers.copy(), body=self.body)

    def with_headers(self, headers: HeaderCollection) -> "Message":
        """Create a new message with different headers."""
        return Message(version=self.version, headers=headers.copy(), body=self.body)

    def with_body(self, body: BodyLike) -> "Message":
        """Create a new message with a different body."""
        return Message(version=self.version, headers=self.headers.copy(), body=to_body(body))


@dataclass(frozen=True)
class ClientMessage:
    """
    Request-side message: a Message plus method and resource.

    The resource always starts with "/"; one is prepended when missing.
    """

    message: Message = field(default_factory=Message)
    method: ClientMethod = ClientMethod.GET
    resource: str = "/"

    def __post_init__(self) -> None:
        """Validate request data after initialization."""
        if not isinstance(self.message, Message):
            raise ValueError("message must be a Message")

        if not isinstance(self.method, ClientMethod):
            raise ValueError("method must be a ClientMethod")

        if not isinstance(self.resource, str):
            raise ValueError("resource must be str")

        object.__setattr__(self, "resource", normalize_resource(self.resource))

    @property
    def version(self) -> Version:
        return self.message.version

    @property
    def headers(self) -> HeaderCollection:
        return self.message.headers

    @property
    def body(self) -> bytes:
        return self.message.body

    def with_message(self, message: Message) -> "ClientMessage":
        """Create a new request with a different message."""
        return ClientMessage(message=message.copy(), method=self.method, resource=self.resource)

    def with_method(self, method: ClientMethod) -> "ClientMessage":
        """Create a new request with a different method."""
        return ClientMessage(message=self.message.copy(), method=method, resource=self.resource)

    def with_resource(self, resource: str) -> "ClientMessage":
        """Create a new request with a different resource."""
        return ClientMessage(message=self.message.copy(), method=self.method, resource=resource)

    def with_body(self, body: BodyLike) -> "ClientMessage":
        """Create a new request with a different body."""
        return ClientMessage(
            message=self.message.with_body(body), method=self.method, resource=self.resource
        )


@dataclass(frozen=True)
class ServerMessage:
    """Response-side message: a Message plus status."""

    message: Message = field(default_factory=Message)
    status: Status = ServerStatus.OK

    def __post_init__(self) -> None:
        """Validate response data after initialization."""
        if not isinstance(self.message, Message):
            raise ValueError("message must be a Message")

        if not isinstance(self.status, (ServerStatus, OtherStatus)):
            raise ValueError("status must be a ServerStatus or OtherStatus")

    @property
    def version(self) -> Version:
        return self.message.version

    @property
    def headers(self) -> HeaderCollection:
        return self.message.headers

    @property
    def body(self) -> bytes:
        return self.message.body

    def with_message(self, message: Message) -> "ServerMessage":
        """Create a new response with a different message."""
        return ServerMessage(message=message.copy(), status=self.status)

    def with_status(self, status: Status) -> "ServerMessage":
        """Create a new response with a different status."""
        return ServerMessage(message=self.message.copy(), status=status)

    def with_body(self, body: BodyLike) -> "ServerMessage":
        """Create a new response with a different body."""
        return ServerMessage(message=self.message.with_body(body), status=self.status)


class _Builder:
    """Shared exhaustion handling for the fluent builders."""

    def __init__(self) -> None:
        self._exhausted = False

    def _check(self) -> None:
        if self._exhausted:
            raise BuilderError(f"{type(self).__name__} has already been built")

    def _finish(self) -> None:
        self._check()
        self._exhausted = True

    def copy(self) -> Self:
        """Clone this builder so the clone can be built separately."""
        self._check()
        return copy.deepcopy(self)


class MessageBuilder(_Builder):
    """
    Fluent builder for Message.

    Unset fields default to HTTP/1.1, an empty header collection and an
    empty body. A builder can only be built once; use copy() beforehand to
    build several messages from the same configuration.
    """

    def __init__(self) -> None:
        super().__init__()
        self._version: Optional[Version] = None
        self._headers: Optional[HeaderCollection] = None
        self._body: Optional[bytes] = None

    def version(self, version: Version) -> Self:
        self._check()
        self._version = version
        return self

    def header(self, headers: HeaderCollection) -> Self:
        self._check()
        self._headers = headers.copy()
        return self

    def header_insert(self, raw: HeaderLine) -> Self:
        """
        Parse a raw header line into the headers being built.

        A line that does not parse is ignored.
        """
        self._check()
        if self._headers is None:
            self._headers = HeaderCollection()
        try:
            self._headers.try_insert_from_line(raw)
        except ParseError as e:
            logger.debug(f"Ignoring header line {raw!r}: {e.message}")
        return self

    def body(self, body: BodyLike) -> Self:
        self._check()
        self._body = to_body(body)
        return self

    def build(self) -> Message:
        self._finish()
        return Message(
            version=self._version if self._version is not None else Version.HTTP1_1,
            headers=self._headers if self._headers is not None else HeaderCollection(),
            body=self._body if self._body is not None else b"",
        )


class ClientMessageBuilder(_Builder):
    """Fluent builder for ClientMessage, defaulting to GET on "/"."""

    def __init__(self) -> None:
        super().__init__()
        self._message: Optional[Message] = None
        self._method: Optional[ClientMethod] = None
        self._resource: Optional[str] = None

    def message(self, message: Message) -> Self:
        self._check()
        self._message = message.copy()
        return self

    def method(self, method: ClientMethod) -> Self:
        self._check()
        self._method = method
        return self

    def resource(self, resource: str) -> Self:
        self._check()
        self._resource = resource
        return self

    def build(self) -> ClientMessage:
        self._finish()
        return ClientMessage(
            message=self._message if self._message is not None else MessageBuilder().build(),
            method=self._method if self._method is not None else ClientMethod.GET,
            resource=self._resource if self._resource is not None else "/",
        )


class ServerMessageBuilder(_Builder):
    """Fluent builder for ServerMessage, defaulting to 200 OK."""

    def __init__(self) -> None:
        super().__init__()
        self._message: Optional[Message] = None
        self._status: Optional[Status] = None

    def message(self, message: Message) -> Self:
        self._check()
        self._message = message.copy()
        return self

    def status(self, status: Status) -> Self:
        self._check()
        self._status = status
        return self

    def build(self) -> ServerMessage:
        self._finish()
        return ServerMessage(
            message=self._message if self._message is not None else MessageBuilder().build(),
            status=self._status if self._status is not None else ServerStatus.OK,
        )
