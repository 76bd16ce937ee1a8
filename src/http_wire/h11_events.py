"""
h11 interoperability for http_wire.

This module converts ClientMessage / ServerMessage wrappers to and from h11
events, and reads complete buffers through an h11.Connection for callers
that want RFC 7230 framing enforced by h11's state machine instead of the
lenient text codec.
"""

import logging
from typing import Iterable, List, Union

import h11

from .exceptions import ProtocolError
from .headers import HeaderCollection
from .http_enums import ClientMethod, ServerStatus, Version, decode_wire
from .http_primitives import ClientMessage, Message, ServerMessage

logger = logging.getLogger(__name__)

WireMessage = Union[ClientMessage, ServerMessage]

_FRAMING_HEADERS = ("content-length", "transfer-encoding")


def _h11_version(version: Version) -> bytes:
    if version is Version.HTTP2:
        raise ProtocolError("h11 only supports HTTP/1.0 and HTTP/1.1")
    return version.as_bytes()[len(b"HTTP/"):]


def _h11_headers(message: WireMessage) -> List[tuple]:
    headers = [
        (name.encode("utf-8"), value.encode("utf-8"))
        for name, value in message.headers
    ]
    has_framing = any(name.lower() in _FRAMING_HEADERS for name in message.headers.keys())
    if message.body and not has_framing:
        headers.append((b"Content-Length", str(len(message.body)).encode("ascii")))
    return headers


def to_h11_events(message: WireMessage) -> List[h11.Event]:
    """
    Convert a message to the h11 events that describe it.

    A Content-Length header is added when the body is non-empty and the
    message carries no framing header of its own.

    Args:
        message: The ClientMessage or ServerMessage to convert

    Returns:
        The head event, a Data event if there is a body, and EndOfMessage.
        Informational (1xx) statuses yield a single InformationalResponse.

    Raises:
        ProtocolError: If h11 rejects the message
    """
    http_version = _h11_version(message.version)
    headers = _h11_headers(message)

    try:
        if isinstance(message, ClientMessage):
            head = h11.Request(
                method=message.method.as_bytes(),
                target=message.resource.encode("utf-8"),
                headers=headers,
                http_version=http_version,
            )
        elif message.status.code < 200:
            return [
                h11.InformationalResponse(
                    status_code=message.status.code,
                    reason=message.status.reason.encode("utf-8"),
                    headers=headers,
                    http_version=http_version,
                )
            ]
        else:
            head = h11.Response(
                status_code=message.status.code,
                reason=message.status.reason.encode("utf-8"),
                headers=headers,
                http_version=http_version,
            )
    except h11.ProtocolError as e:
        raise ProtocolError(f"h11 rejected message: {e}", cause=e) from e

    events: List[h11.Event] = [head]
    if message.body:
        events.append(h11.Data(data=message.body))
    events.append(h11.EndOfMessage())
    return events


def from_h11_events(events: Iterable[h11.Event]) -> WireMessage:
    """
    Build a message from h11 events.

    Events before the first Request or Response are ignored, Data events
    are concatenated into the body and EndOfMessage ends the message.
    Method and version tokens are resolved strictly.

    Raises:
        ProtocolError: If the events do not contain a request or response
        MethodOrStatusNotRecognizedError: If the method is not known
        VersionNotRecognizedError: If the version is not known
    """
    head = None
    body = bytearray()
    for event in events:
        if head is None:
            if isinstance(event, (h11.Request, h11.Response)):
                head = event
            continue
        if isinstance(event, h11.Data):
            body += event.data
        elif isinstance(event, h11.EndOfMessage):
            break

    if head is None:
        raise ProtocolError("no request or response event found")

    headers = HeaderCollection()
    for name, value in head.headers.raw_items():
        headers.insert(decode_wire(name), decode_wire(value))

    message = Message(
        version=Version.from_wire(b"HTTP/" + head.http_version),
        headers=headers,
        body=bytes(body),
    )

    if isinstance(head, h11.Request):
        return ClientMessage(
            message=message,
            method=ClientMethod.from_wire(head.method),
            resource=decode_wire(head.target),
        )
    return ServerMessage(
        message=message,
        status=ServerStatus.from_code(head.status_code, decode_wire(head.reason)),
    )


def _drain(conn: h11.Connection) -> List[h11.Event]:
    events: List[h11.Event] = []
    while True:
        try:
            event = conn.next_event()
        except h11.ProtocolError as e:
            raise ProtocolError(f"h11 rejected input: {e}", cause=e) from e

        if event is h11.NEED_DATA:
            raise ProtocolError("incomplete message")
        if isinstance(event, h11.ConnectionClosed):
            raise ProtocolError("connection closed before end of message")

        events.append(event)
        if isinstance(event, h11.EndOfMessage):
            return events


def read_request(data: bytes) -> ClientMessage:
    """
    Read a complete request buffer through h11.

    The buffer is treated as everything the peer sent before closing.

    Raises:
        ProtocolError: If h11 rejects the buffer or it is incomplete
    """
    conn = h11.Connection(h11.SERVER)
    conn.receive_data(bytes(data))
    conn.receive_data(b"")

    message = from_h11_events(_drain(conn))
    logger.debug(f"h11 read request {message.method} {message.resource}")
    return message


def read_response(data: bytes, request_method: ClientMethod = ClientMethod.GET) -> ServerMessage:
    """
    Read a complete response buffer through h11.

    h11 needs the request the response answers in order to frame it; a
    bodyless request with request_method is sent first. A response without
    Content-Length ends at the end of the buffer.

    Raises:
        ProtocolError: If h11 rejects the buffer or it is incomplete
    """
    conn = h11.Connection(h11.CLIENT)
    try:
        conn.send(
            h11.Request(
                method=request_method.as_bytes(),
                target=b"/",
                headers=[(b"Host", b"localhost")],
            )
        )
        conn.send(h11.EndOfMessage())
    except h11.ProtocolError as e:
        raise ProtocolError(f"h11 rejected request: {e}", cause=e) from e

    conn.receive_data(bytes(data))
    conn.receive_data(b"")

    message = from_h11_events(_drain(conn))
    logger.debug(f"h11 read response {message.status}")
    return message
