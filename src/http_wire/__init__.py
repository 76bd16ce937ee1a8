"""
http_wire - Textual HTTP/1.x message codec

A small codec that turns raw HTTP/1.x request and response buffers into
structured messages and renders structured messages back into wire bytes,
with an optional bridge to h11 events.
"""

__version__ = "0.1.0"
__author__ = "Developer"
__email__ = "dev@example.com"

# Import main components for easy access
from .http_enums import ClientMethod, OtherStatus, ServerStatus, Status, Version
from .headers import HeaderCollection, parse_header_line
from .http_primitives import (
    ClientMessage,
    ClientMessageBuilder,
    Message,
    MessageBuilder,
    ServerMessage,
    ServerMessageBuilder,
)
from .codec import (
    HTTPCodec,
    ParsePolicy,
    parse_request,
    parse_response,
    render,
    serialize,
)
from .h11_events import from_h11_events, read_request, read_response, to_h11_events
from .exceptions import (
    HTTPWireError,
    ParseError,
    EncodingError,
    EmptyInputError,
    MalformedLineError,
    MalformedStartLineError,
    MethodOrStatusNotRecognizedError,
    VersionNotRecognizedError,
    BuilderError,
    ProtocolError,
)

__all__ = [
    "ClientMethod",
    "OtherStatus",
    "ServerStatus",
    "Status",
    "Version",
    "HeaderCollection",
    "parse_header_line",
    "ClientMessage",
    "ClientMessageBuilder",
    "Message",
    "MessageBuilder",
    "ServerMessage",
    "ServerMessageBuilder",
    "HTTPCodec",
    "ParsePolicy",
    "parse_request",
    "parse_response",
    "render",
    "serialize",
    "from_h11_events",
    "read_request",
    "read_response",
    "to_h11_events",
    "HTTPWireError",
    "ParseError",
    "EncodingError",
    "EmptyInputError",
    "MalformedLineError",
    "MalformedStartLineError",
    "MethodOrStatusNotRecognizedError",
    "VersionNotRecognizedError",
    "BuilderError",
    "ProtocolError",
]
