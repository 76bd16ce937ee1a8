"""
Pytest configuration for http_wire tests.

This file contains shared fixtures and configuration
for all tests in the project.
"""

import pytest

from http_wire.codec import HTTPCodec, ParsePolicy
from http_wire.headers import HeaderCollection


@pytest.fixture
def codec():
    """Create a codec with the default lenient policy."""
    return HTTPCodec()


@pytest.fixture
def strict_codec():
    """Create a codec that rejects unknown tokens."""
    return HTTPCodec(policy=ParsePolicy.STRICT)


@pytest.fixture
def sample_headers():
    """Sample headers for testing."""
    return HeaderCollection({
        "Content-Type": "application/json",
        "Authorization": "Bearer token123",
        "User-Agent": "http_wire/0.1.0",
        "Accept": "*/*",
    })


@pytest.fixture
def sample_request_bytes():
    """A complete request with headers and body."""
    return (
        b"POST /xp HTTP/1.1\r\n"
        b"Host: 127.0.0.1:8000\r\n"
        b"\r\n"
        b"xxxxxx"
    )


@pytest.fixture
def sample_response_bytes():
    """A complete response with headers and body."""
    return (
        b"HTTP/1.1 404 Not Found\r\n"
        b"Content-Type: text/html\r\n"
        b"Content-Length: 13\r\n"
        b"\r\n"
        b"<h1>Gone</h1>"
    )
