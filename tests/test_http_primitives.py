"""
Unit tests for HTTP primitives.

Tests the Message, ClientMessage and ServerMessage classes and their
builders to ensure defaults, validation and immutability.
"""

import dataclasses

import pytest

from http_wire.exceptions import BuilderError
from http_wire.headers import HeaderCollection
from http_wire.http_enums import ClientMethod, OtherStatus, ServerStatus, Version
from http_wire.http_primitives import (
    ClientMessage,
    ClientMessageBuilder,
    Message,
    MessageBuilder,
    ServerMessage,
    ServerMessageBuilder,
)


class TestMessage:
    """Test Message class functionality."""

    def test_defaults(self) -> None:
        """Test a message with default fields."""
        message = Message()
        assert message.version is Version.HTTP1_1
        assert message.headers.is_empty()
        assert message.body == b""

    def test_validation_version(self) -> None:
        """Test that version must be a Version."""
        with pytest.raises(ValueError, match="version must be a Version"):
            Message(version="HTTP/1.1")

    def test_validation_headers(self) -> None:
        """Test that headers must be a HeaderCollection."""
        with pytest.raises(ValueError, match="headers must be a HeaderCollection"):
            Message(headers={"Host": "example.com"})

    def test_validation_body(self) -> None:
        """Test that body must be bytes."""
        with pytest.raises(ValueError, match="body must be bytes"):
            Message(body="text")

    def test_immutability(self) -> None:
        """Test that Message is immutable."""
        message = Message()
        with pytest.raises(dataclasses.FrozenInstanceError):
            message.body = b"changed"

    def test_headers_are_mutable_in_place(self) -> None:
        """Test the header mutation accessor."""
        message = Message()
        message.headers.insert("Host", "example.com")
        assert message.headers.get("Host") == "example.com"

    def test_with_body(self) -> None:
        """Test creating a new message with a different body."""
        original = Message(version=Version.HTTP1_0)
        modified = original.with_body("hello")
        assert modified.body == b"hello"
        assert modified.version is Version.HTTP1_0
        assert original.body == b""

    def test_with_version_and_headers(self) -> None:
        """Test the remaining with_* helpers."""
        headers = HeaderCollection({"A": "1"})
        message = Message().with_version(Version.HTTP2).with_headers(headers)
        assert message.version is Version.HTTP2
        assert message.headers == headers
        assert message.headers is not headers

    @pytest.mark.parametrize("derive", [
        lambda m: m.with_version(Version.HTTP1_0),
        lambda m: m.with_body(b"new"),
        lambda m: m.with_headers(m.headers),
        lambda m: m.copy(),
    ])
    def test_derived_message_owns_headers(self, derive) -> None:
        """Test that a derived message does not share its header collection."""
        original = Message(headers=HeaderCollection({"Host": "a"}))
        derived = derive(original)

        derived.headers.insert("X-New", "1")
        original.headers.insert("X-Old", "1")

        assert dict(original.headers) == {"Host": "a", "X-Old": "1"}
        assert dict(derived.headers) == {"Host": "a", "X-New": "1"}


class TestMessageBuilder:
    """Test MessageBuilder functionality."""

    def test_build_defaults(self) -> None:
        """Test that unset fields get defaults."""
        message = MessageBuilder().build()
        assert message == Message(Version.HTTP1_1, HeaderCollection(), b"")

    def test_build_all_fields(self) -> None:
        """Test configuring every field."""
        headers = HeaderCollection({"Host": "example.com"})
        message = (
            MessageBuilder()
            .version(Version.HTTP1_0)
            .header(headers)
            .body(bytearray(b"payload"))
            .build()
        )
        assert message.version is Version.HTTP1_0
        assert message.headers == headers
        assert message.body == b"payload"

    def test_body_from_str(self) -> None:
        """Test that text bodies are encoded as UTF-8."""
        message = MessageBuilder().body("<h1>Hello!</h1>").build()
        assert message.body == b"<h1>Hello!</h1>"

    def test_body_rejects_other_types(self) -> None:
        """Test that non bytes-like bodies are rejected."""
        with pytest.raises(ValueError, match="body must be bytes-like or str"):
            MessageBuilder().body(42)

    def test_header_insert(self) -> None:
        """Test inserting raw header lines."""
        message = (
            MessageBuilder()
            .header_insert("Host: 127.0.0.1:8000")
            .header_insert(b"Accept: */*")
            .build()
        )
        assert message.headers.get("Host") == "127.0.0.1:8000"
        assert message.headers.get("Accept") == "*/*"

    def test_header_insert_ignores_failures(self) -> None:
        """Test that unparsable header lines are ignored."""
        message = (
            MessageBuilder()
            .header_insert("")
            .header_insert("NoValue:")
            .header_insert("Host: example.com")
            .build()
        )
        assert len(message.headers) == 1

    def test_header_insert_extends_existing(self) -> None:
        """Test that header_insert adds to a collection set by header()."""
        headers = HeaderCollection({"A": "1"})
        message = MessageBuilder().header(headers).header_insert("B: 2").build()
        assert dict(message.headers) == {"A": "1", "B": "2"}
        assert dict(headers) == {"A": "1"}

    def test_caller_collection_not_shared(self) -> None:
        """Test that the built message does not alias the caller's headers."""
        headers = HeaderCollection()
        message = MessageBuilder().header(headers).build()

        headers.insert("A", "b")
        assert message.headers.is_empty()

    def test_exhausted_after_build(self) -> None:
        """Test that a builder cannot be reused."""
        builder = MessageBuilder().body("x")
        builder.build()

        with pytest.raises(BuilderError):
            builder.build()

        with pytest.raises(BuilderError):
            builder.body("y")

    def test_copy_before_build(self) -> None:
        """Test cloning a builder."""
        builder = MessageBuilder().header_insert("Host: example.com")
        clone = builder.copy()

        first = builder.build()
        second = clone.body("other").build()

        assert first.body == b""
        assert second.body == b"other"
        assert first.headers == second.headers
        assert first.headers is not second.headers

    def test_copy_after_build(self) -> None:
        """Test that an exhausted builder cannot be cloned."""
        builder = MessageBuilder()
        builder.build()
        with pytest.raises(BuilderError):
            builder.copy()


class TestClientMessage:
    """Test ClientMessage and ClientMessageBuilder."""

    def test_builder_defaults(self) -> None:
        """Test GET on "/" with a default message."""
        request = ClientMessageBuilder().build()
        assert request.method is ClientMethod.GET
        assert request.resource == "/"
        assert request.version is Version.HTTP1_1
        assert request.body == b""

    def test_builder_all_fields(self) -> None:
        """Test configuring every field."""
        message = MessageBuilder().body("data").build()
        request = (
            ClientMessageBuilder()
            .message(message)
            .method(ClientMethod.POST)
            .resource("/api/items")
            .build()
        )
        assert request.method is ClientMethod.POST
        assert request.resource == "/api/items"
        assert request.message is message
        assert request.body == b"data"

    def test_resource_normalized(self) -> None:
        """Test that a leading slash is prepended."""
        assert ClientMessage(resource="xp").resource == "/xp"
        assert ClientMessageBuilder().resource("w/xp").build().resource == "/w/xp"
        assert ClientMessage(resource="/xp").resource == "/xp"

    def test_validation_method(self) -> None:
        """Test that method must be a ClientMethod."""
        with pytest.raises(ValueError, match="method must be a ClientMethod"):
            ClientMessage(method="GET")

    def test_with_helpers(self) -> None:
        """Test creating modified requests."""
        original = ClientMessage()
        modified = original.with_method(ClientMethod.PUT).with_resource("x").with_body(b"1")
        assert modified.method is ClientMethod.PUT
        assert modified.resource == "/x"
        assert modified.body == b"1"
        assert original.body == b""

    @pytest.mark.parametrize("derive", [
        lambda r: r.with_method(ClientMethod.POST),
        lambda r: r.with_resource("/other"),
        lambda r: r.with_body(b"x"),
        lambda r: r.with_message(r.message),
    ])
    def test_derived_request_owns_headers(self, derive) -> None:
        """Test that derived requests never share a header collection."""
        request = ClientMessage(message=Message(headers=HeaderCollection({"Host": "a"})))
        derived = derive(request)

        derived.headers.insert("X-New", "1")
        assert "X-New" not in request.headers
        assert derived.headers.get("Host") == "a"

    def test_builder_copies_message(self) -> None:
        """Test that the built request does not alias the given message."""
        message = Message(headers=HeaderCollection({"Host": "a"}))
        request = ClientMessageBuilder().message(message).build()

        request.headers.insert("X-New", "1")
        assert "X-New" not in message.headers

    def test_exhausted_after_build(self) -> None:
        """Test that the builder cannot be reused."""
        builder = ClientMessageBuilder()
        builder.build()
        with pytest.raises(BuilderError):
            builder.method(ClientMethod.POST)


class TestServerMessage:
    """Test ServerMessage and ServerMessageBuilder."""

    def test_builder_defaults(self) -> None:
        """Test 200 OK with a default message."""
        response = ServerMessageBuilder().build()
        assert response.status is ServerStatus.OK
        assert response.version is Version.HTTP1_1
        assert response.headers.is_empty()

    def test_builder_other_status(self) -> None:
        """Test building with an open status."""
        response = (
            ServerMessageBuilder()
            .message(MessageBuilder().body("<h1>Hello!</h1>").build())
            .status(ServerStatus.other(418, "I'm a teapot"))
            .build()
        )
        assert response.status == OtherStatus(418, "I'm a teapot")
        assert response.body == b"<h1>Hello!</h1>"

    def test_validation_status(self) -> None:
        """Test that status must be a ServerStatus or OtherStatus."""
        with pytest.raises(ValueError, match="status must be"):
            ServerMessage(status=200)

    def test_with_helpers(self) -> None:
        """Test creating modified responses."""
        response = ServerMessage().with_status(ServerStatus.CREATED).with_body("done")
        assert response.status is ServerStatus.CREATED
        assert response.body == b"done"

    @pytest.mark.parametrize("derive", [
        lambda r: r.with_status(ServerStatus.NOT_FOUND),
        lambda r: r.with_body("x"),
        lambda r: r.with_message(r.message),
    ])
    def test_derived_response_owns_headers(self, derive) -> None:
        """Test that derived responses never share a header collection."""
        response = ServerMessage(message=Message(headers=HeaderCollection({"Server": "a"})))
        derived = derive(response)

        derived.headers.remove("Server")
        assert response.headers.get("Server") == "a"
        assert derived.headers.is_empty()

    def test_builder_copies_message(self) -> None:
        """Test that the built response does not alias the given message."""
        message = Message()
        response = ServerMessageBuilder().message(message).build()

        response.headers.insert("Server", "a")
        assert message.headers.is_empty()
