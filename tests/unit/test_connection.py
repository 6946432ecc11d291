"""
Unit tests for the connection wrapper.
"""

import socket

import pytest

from minihttp.core.connection import Connection, ConnectionState
from minihttp.http.request import HTTPParseError, RequestReader


@pytest.fixture
def pair():
    """A connected (server_side, client_side) socket pair."""
    server_side, client_side = socket.socketpair()
    yield server_side, client_side
    client_side.close()
    server_side.close()


class TestConnection:
    """Tests for Connection class."""

    def test_initial_state(self, pair):
        server_side, _ = pair
        conn = Connection(socket=server_side, address=("127.0.0.1", 40000))

        assert conn.state == ConnectionState.ACCEPTED
        assert conn.client_ip == "127.0.0.1"
        assert len(conn.id) == 8
        assert not conn.is_closed

    def test_full_lifecycle(self, pair):
        """Test read → write → close on a healthy connection."""
        server_side, client_side = pair
        client_side.sendall(b"GET /echo/hi HTTP/1.1\r\nHost: x\r\n\r\n")

        with Connection(socket=server_side, address=("127.0.0.1", 40000)) as conn:
            request = conn.read_request(RequestReader())
            assert conn.state == ConnectionState.READING
            assert request.path == "/echo/hi"
            assert request.client_address == ("127.0.0.1", 40000)

            assert conn.send_response(b"HTTP/1.1 200 OK\r\n\r\n")
            assert conn.state == ConnectionState.WRITING
            client_side.shutdown(socket.SHUT_WR)

        assert conn.state == ConnectionState.CLOSED
        assert conn.is_closed
        assert client_side.recv(1024) == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_parse_error_marks_failed(self, pair):
        server_side, client_side = pair
        client_side.sendall(b"GET / HTTP/1.1\r\n")
        client_side.shutdown(socket.SHUT_WR)

        with pytest.raises(HTTPParseError):
            with Connection(socket=server_side, address=("127.0.0.1", 40000)) as conn:
                conn.read_request(RequestReader())

        assert conn.state == ConnectionState.FAILED
        assert conn.is_closed

    def test_failed_stays_failed(self, pair):
        server_side, client_side = pair
        client_side.shutdown(socket.SHUT_WR)
        conn = Connection(socket=server_side, address=("127.0.0.1", 40000))

        conn.fail()
        conn.close()

        assert conn.state == ConnectionState.FAILED

    def test_close_idempotent(self, pair):
        server_side, client_side = pair
        client_side.shutdown(socket.SHUT_WR)
        conn = Connection(socket=server_side, address=("127.0.0.1", 40000))

        conn.close()
        conn.close()

        assert conn.state == ConnectionState.CLOSED
