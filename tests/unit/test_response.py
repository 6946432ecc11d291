"""
Unit tests for HTTP response building.
"""

import pytest

from minihttp.http.response import (
    HTTPResponse,
    ResponseBuilder,
    ok,
    created,
    not_found,
    method_not_allowed,
)
from minihttp.http.status_codes import HTTPStatus


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        response = HTTPResponse(status=HTTPStatus.OK)
        assert response.status_line == "HTTP/1.1 200 OK"

        response = HTTPResponse(status=HTTPStatus.NOT_FOUND)
        assert response.status_line == "HTTP/1.1 404 Not Found"

    def test_empty_ok_is_exact(self):
        """Test that no headers are added automatically."""
        assert ok().to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_headers_in_insertion_order(self):
        """Test that headers are written in the order they were added."""
        response = HTTPResponse(body=b"test")
        response.add_header("Content-Type", "text/plain")
        response.add_header("Content-Encoding", "gzip")
        response.add_header("Content-Length", "4")

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Encoding: gzip\r\n"
            b"Content-Length: 4\r\n"
            b"\r\n"
            b"test"
        )

    def test_add_header_chaining(self):
        """Test method chaining for headers."""
        response = (HTTPResponse()
            .add_header("X-One", "1")
            .add_header("X-Two", "2"))

        assert response.headers == [("X-One", "1"), ("X-Two", "2")]

    def test_get_header_case_insensitive(self):
        response = HTTPResponse().add_header("Content-Type", "text/plain")

        assert response.get_header("content-type") == "text/plain"
        assert response.has_header("CONTENT-TYPE")
        assert response.get_header("Content-Length") is None

    def test_binary_body_untouched(self):
        body = bytes(range(256))
        response = HTTPResponse(body=body)

        assert response.to_bytes().endswith(b"\r\n\r\n" + body)


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_text_response(self):
        """Test building a text response."""
        response = ResponseBuilder().text("héllo").build()

        assert response.status == HTTPStatus.OK
        assert response.body == "héllo".encode("utf-8")
        assert response.headers == [("Content-Type", "text/plain")]
        assert response.compressible is True

    def test_binary_response(self):
        response = ResponseBuilder().binary(b"\x00\x01").build()

        assert response.body == b"\x00\x01"
        assert response.get_header("Content-Type") == "application/octet-stream"
        assert response.compressible is True

    def test_plain_body_not_compressible(self):
        response = ResponseBuilder().body("x").build()

        assert response.body == b"x"
        assert response.compressible is False

    def test_builder_no_content_length(self):
        """Test that the builder leaves Content-Length to the encoder."""
        response = ResponseBuilder().text("abc").build()

        assert not response.has_header("Content-Length")

    def test_status_and_header_chaining(self):
        data = (ResponseBuilder()
            .status(HTTPStatus.CREATED)
            .header("X-Test", "1")
            .build()
            .to_bytes())

        assert data == b"HTTP/1.1 201 Created\r\nX-Test: 1\r\n\r\n"


class TestConvenienceFunctions:
    """Tests for the empty-response helpers."""

    @pytest.mark.parametrize("factory,expected", [
        (ok, b"HTTP/1.1 200 OK\r\n\r\n"),
        (created, b"HTTP/1.1 201 Created\r\n\r\n"),
        (not_found, b"HTTP/1.1 404 Not Found\r\n\r\n"),
        (method_not_allowed, b"HTTP/1.1 405 Method Not Allowed\r\n\r\n"),
    ])
    def test_empty_responses(self, factory, expected):
        response = factory()

        assert response.to_bytes() == expected
        assert response.compressible is False

    def test_fresh_instances(self):
        """Test that helpers never share header lists."""
        first = ok()
        first.add_header("X-Test", "1")

        assert ok().headers == []


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_phrases(self):
        assert HTTPStatus.OK.phrase == "OK"
        assert HTTPStatus.CREATED.phrase == "Created"
        assert HTTPStatus.NOT_FOUND.phrase == "Not Found"
        assert HTTPStatus.METHOD_NOT_ALLOWED.phrase == "Method Not Allowed"

    def test_is_success(self):
        assert HTTPStatus.CREATED.is_success
        assert not HTTPStatus.NOT_FOUND.is_success
