"""
HTTP/1.x text codec for http_wire.

This module implements HTTPCodec, which parses raw byte buffers into
ClientMessage / ServerMessage wrappers and serializes wrappers back into
wire bytes. The codec is synchronous and performs no I/O; a transport feeds
it complete buffers and writes its output verbatim.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, TypeVar, Union

from .exceptions import (
    EmptyInputError,
    EncodingError,
    HTTPWireError,
    MalformedStartLineError,
    MethodOrStatusNotRecognizedError,
    ParseError,
    VersionNotRecognizedError,
)
from .headers import DEFAULT_VALUE_SEPARATOR, HeaderCollection
from .http_enums import ClientMethod, ServerStatus, Status, Version
from .http_primitives import ClientMessage, Message, ServerMessage

logger = logging.getLogger(__name__)

WireMessage = Union[ClientMessage, ServerMessage]
RawBuffer = Union[bytes, bytearray, memoryview]

T = TypeVar("T")


class ParsePolicy(Enum):
    """What the codec does with a method, status or version it does not know."""
    STRICT = "strict"     # Abort the parse with an error
    LENIENT = "lenient"   # Substitute the configured default


def _split_lines(data: bytes) -> Iterator[Tuple[bytes, int]]:
    """
    Yield (line, next_offset) for each line of data.

    Lines end at "\\n"; a "\\r" right before it is dropped. next_offset is
    the position just after the line terminator.
    """
    start = 0
    size = len(data)
    while start < size:
        end = data.find(b"\n", start)
        if end == -1:
            yield data[start:], size
            return
        line_end = end - 1 if end > start and data[end - 1:end] == b"\r" else end
        yield data[start:line_end], end + 1
        start = end + 1


class HTTPCodec:
    """
    Parse/serialize pair for textual HTTP/1.x messages.

    Header lines that fail to parse are dropped; the end of the header block
    is the first blank line. Recognition of method, status and version
    tokens follows the configured ParsePolicy.
    """

    # Default configuration
    DEFAULT_POLICY = ParsePolicy.LENIENT
    DEFAULT_LINE_TERMINATOR = "\r\n"
    DEFAULT_HEADER_SUFFIX = ""  # ";" reproduces the legacy server form
    DEFAULT_VALUE_SEPARATOR = DEFAULT_VALUE_SEPARATOR
    DEFAULT_METHOD = ClientMethod.GET
    DEFAULT_VERSION = Version.HTTP1_1
    DEFAULT_STATUS = ServerStatus.OK

    def __init__(
        self,
        policy: Optional[ParsePolicy] = None,
        line_terminator: Optional[str] = None,
        header_suffix: Optional[str] = None,
        value_separator: Optional[str] = None,
        default_method: Optional[ClientMethod] = None,
        default_version: Optional[Version] = None,
        default_status: Optional[Status] = None,
    ):
        """
        Initialize the codec.

        Args:
            policy: Handling of unrecognized method, status and version tokens
            line_terminator: Line terminator written on output
            header_suffix: String written after each "key:value" on output
            value_separator: Separator used to rejoin header value tokens
            default_method: Method substituted under the lenient policy
            default_version: Version substituted under the lenient policy
            default_status: Status substituted under the lenient policy
        """
        self._policy = policy or self.DEFAULT_POLICY
        self._line_terminator = (
            line_terminator if line_terminator is not None else self.DEFAULT_LINE_TERMINATOR
        )
        self._header_suffix = (
            header_suffix if header_suffix is not None else self.DEFAULT_HEADER_SUFFIX
        )
        self._value_separator = (
            value_separator if value_separator is not None else self.DEFAULT_VALUE_SEPARATOR
        )
        if "\r" in self._value_separator or "\n" in self._value_separator:
            raise ValueError("value_separator must not contain line breaks")
        self._default_method = default_method or self.DEFAULT_METHOD
        self._default_version = default_version or self.DEFAULT_VERSION
        self._default_status = default_status or self.DEFAULT_STATUS

        # Metrics
        self._messages_parsed = 0
        self._messages_serialized = 0
        self._header_lines_skipped = 0
        self._tokens_defaulted = 0
        self._errors_count = 0

    @property
    def policy(self) -> ParsePolicy:
        return self._policy

    # Parsing

    def parse_request(self, data: RawBuffer) -> ClientMessage:
        """
        Parse a raw request buffer.

        Args:
            data: The complete request bytes

        Returns:
            The parsed ClientMessage

        Raises:
            EncodingError: If the buffer is not valid UTF-8
            EmptyInputError: If the buffer is empty
            MalformedStartLineError: If the request line is not three tokens
            MethodOrStatusNotRecognizedError: Unknown method under the strict policy
            VersionNotRecognizedError: Unknown version under the strict policy
        """
        return self._parse(data, self._build_request)

    def parse_response(self, data: RawBuffer) -> ServerMessage:
        """
        Parse a raw response buffer.

        Args:
            data: The complete response bytes

        Returns:
            The parsed ServerMessage

        Raises:
            EncodingError: If the buffer is not valid UTF-8
            EmptyInputError: If the buffer is empty
            MalformedStartLineError: If the status line lacks version, code or reason
            MethodOrStatusNotRecognizedError: Unknown status under the strict policy
            VersionNotRecognizedError: Unknown version under the strict policy
        """
        return self._parse(data, self._build_response)

    def _parse(
        self,
        data: RawBuffer,
        build: Callable[[str, Message], T],
    ) -> T:
        try:
            result = self._parse_buffer(bytes(data), build)
        except ParseError:
            self._errors_count += 1
            raise

        self._messages_parsed += 1
        return result

    def _parse_buffer(
        self,
        data: bytes,
        build: Callable[[str, Message], T],
    ) -> T:
        if not data:
            raise EmptyInputError("message buffer is empty")

        try:
            data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError("message is not valid UTF-8", cause=e) from e

        lines = _split_lines(data)
        start_line, body_offset = next(lines)

        headers = HeaderCollection()
        skipped = 0
        for line, next_offset in lines:
            body_offset = next_offset
            if not line.strip():
                break
            try:
                headers.try_insert_from_line(line, self._value_separator)
            except ParseError as e:
                skipped += 1
                logger.debug(f"Skipping header line {line!r}: {e.message}")
        else:
            # No blank line: everything after the start line was headers
            body_offset = len(data)

        self._header_lines_skipped += skipped

        message = Message(
            version=Version.HTTP1_1,
            headers=headers,
            body=data[body_offset:],
        )
        result = build(start_line.decode("utf-8"), message)

        logger.debug(
            f"Parsed {type(result).__name__}: {len(headers)} headers, "
            f"{skipped} skipped, {len(message.body)} body bytes"
        )
        return result

    def _build_request(self, start_line: str, message: Message) -> ClientMessage:
        tokens = start_line.split()
        if len(tokens) != 3:
            raise MalformedStartLineError(
                f"request line {start_line!r} must have 3 tokens, got {len(tokens)}"
            )

        method_token, target, version_token = tokens
        method = self._resolve(
            ClientMethod.from_wire,
            method_token,
            self._default_method,
            MethodOrStatusNotRecognizedError,
        )
        version = self._resolve(
            Version.from_wire,
            version_token,
            self._default_version,
            VersionNotRecognizedError,
        )
        return ClientMessage(
            message=message.with_version(version),
            method=method,
            resource=target,
        )

    def _build_response(self, start_line: str, message: Message) -> ServerMessage:
        tokens = start_line.split(None, 2)
        if len(tokens) != 3:
            raise MalformedStartLineError(
                f"status line {start_line!r} must have a version, a code and a reason"
            )

        version_token, code, reason = tokens
        # Reason phrases may contain single spaces, e.g. "404 Not Found"
        status_token = f"{code} {' '.join(reason.split())}"
        version = self._resolve(
            Version.from_wire,
            version_token,
            self._default_version,
            VersionNotRecognizedError,
        )
        status = self._resolve(
            ServerStatus.from_wire,
            status_token,
            self._default_status,
            MethodOrStatusNotRecognizedError,
        )
        return ServerMessage(message=message.with_version(version), status=status)

    def _resolve(
        self,
        resolve: Callable[[str], Any],
        token: str,
        default: Any,
        error_cls: type,
    ) -> Any:
        try:
            return resolve(token)
        except error_cls:
            if self._policy is ParsePolicy.STRICT:
                raise
            self._tokens_defaulted += 1
            logger.warning(f"Unrecognized token {token!r}, using {default}")
            return default

    # Serialization

    def serialize(self, message: WireMessage) -> bytes:
        """
        Render a message to wire bytes.

        The body is written verbatim without decoding.

        Args:
            message: The ClientMessage or ServerMessage to render

        Returns:
            The complete message bytes
        """
        head = self._render_head(message).encode("utf-8")
        self._messages_serialized += 1
        return head + message.body

    def render(self, message: WireMessage) -> str:
        """
        Render a message to text.

        Body bytes that are not valid UTF-8 are replaced.
        """
        head = self._render_head(message)
        self._messages_serialized += 1
        return head + message.body.decode("utf-8", errors="replace")

    def _render_head(self, message: WireMessage) -> str:
        if isinstance(message, ClientMessage):
            start_line = f"{message.method} {message.resource} {message.version}"
        elif isinstance(message, ServerMessage):
            start_line = f"{message.version} {message.status}"
        else:
            raise HTTPWireError(f"cannot serialize {type(message).__name__}")

        terminator = self._line_terminator
        parts: List[str] = [start_line, terminator]
        for key, value in message.headers:
            parts.append(f"{key}:{value}{self._header_suffix}{terminator}")
        parts.append(terminator)

        logger.debug(f"Serialized start line {start_line!r} with {len(message.headers)} headers")
        return "".join(parts)

    @property
    def metrics(self) -> Dict[str, Any]:
        """
        Get codec metrics.

        Returns:
            Dictionary with codec metrics
        """
        return {
            "messages_parsed": self._messages_parsed,
            "messages_serialized": self._messages_serialized,
            "header_lines_skipped": self._header_lines_skipped,
            "tokens_defaulted": self._tokens_defaulted,
            "errors_count": self._errors_count,
            "policy": self._policy.value,
        }

    def reset_metrics(self) -> None:
        """Reset codec metrics."""
        self._messages_parsed = 0
        self._messages_serialized = 0
        self._header_lines_skipped = 0
        self._tokens_defaulted = 0
        self._errors_count = 0


_default_codec = HTTPCodec()


def parse_request(data: RawBuffer) -> ClientMessage:
    """Parse a request with the default lenient codec."""
    return _default_codec.parse_request(data)


def parse_response(data: RawBuffer) -> ServerMessage:
    """Parse a response with the default lenient codec."""
    return _default_codec.parse_response(data)


def serialize(message: WireMessage) -> bytes:
    """Serialize a message with the default codec."""
    return _default_codec.serialize(message)


def render(message: WireMessage) -> str:
    """Render a message to text with the default codec."""
    return _default_codec.render(message)
