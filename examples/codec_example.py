"""
Basic codec example using http_wire.

This example demonstrates parsing a raw request, building a response
with the fluent builders and serializing it back to wire bytes.
"""

import logging

from http_wire import (
    HTTPCodec,
    MessageBuilder,
    ParsePolicy,
    ServerMessageBuilder,
    ServerStatus,
    read_response,
)

# Configure logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


def handle(codec: HTTPCodec, raw: bytes) -> bytes:
    """Answer a raw request with an HTML page echoing its resource."""
    request = codec.parse_request(raw)
    logger.info(f"Request: {request.method} {request.resource} {request.version}")

    for key, value in request.headers:
        logger.info(f"  {key}: {value}")

    body = f"<h1>You asked for {request.resource}</h1>"
    response = (
        ServerMessageBuilder()
        .message(
            MessageBuilder()
            .header_insert("Content-Type: text/html")
            .header_insert(f"Content-Length: {len(body)}")
            .body(body)
            .build()
        )
        .status(ServerStatus.OK)
        .build()
    )
    return codec.serialize(response)


def main():
    codec = HTTPCodec(policy=ParsePolicy.STRICT)

    raw = (
        b"GET index.html HTTP/1.1\r\n"
        b"Host: 127.0.0.1:8000\r\n"
        b"Accept: text/html\r\n"
        b"\r\n"
    )
    wire = handle(codec, raw)
    logger.info(f"Response bytes: {wire!r}")

    # Cross-check the output with h11
    response = read_response(wire)
    logger.info(f"h11 read: {response.status}, {len(response.body)} body bytes")
    logger.info(f"Codec metrics: {codec.metrics}")


if __name__ == "__main__":
    main()
