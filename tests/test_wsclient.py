import base64
import re
import socket
import threading

import pytest

from wsproxy.wsclient import (
    WebSocketClient,
    WebSocketError,
    compute_accept_key,
    encode_frame,
    generate_headers,
    generate_sec_ws_key,
)


class _EchoServer:
    """Answers the handshake and then echoes every byte back."""

    def __init__(self, status_line="HTTP/1.1 101 Switching Protocols", accept=None):
        self.status_line = status_line
        self.accept = accept
        self.request = b""
        self.listener = socket.socket()
        self.listener.bind(("127.0.0.1", 0))
        self.listener.listen(1)
        self.port = self.listener.getsockname()[1]
        self.thread = threading.Thread(target=self._serve, daemon=True)
        self.thread.start()

    def _serve(self):
        conn, _ = self.listener.accept()
        with conn, self.listener:
            while b"\r\n\r\n" not in self.request:
                chunk = conn.recv(4096)
                if not chunk:
                    return
                self.request += chunk
            key = re.search(rb"Sec-WebSocket-Key: (\S+)", self.request).group(1).decode()
            accept = compute_accept_key(key) if self.accept is None else self.accept
            conn.sendall(
                (
                    f"{self.status_line}\r\nUpgrade: websocket\r\n"
                    f"Connection: Upgrade\r\nSec-WebSocket-Accept: {accept}\r\n\r\n"
                ).encode()
            )
            while chunk := conn.recv(65536):
                conn.sendall(chunk)


def _closed_port():
    with socket.socket() as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]


def test_accept_key_matches_handshake_example():
    assert compute_accept_key("dGhlIHNhbXBsZSBub25jZQ==") == "s3pPLMBiTxaQ9kYGzzhZRbK+xOo="


def test_encode_frame_short_payload_wire_bytes():
    frame = encode_frame(b"Hello", mask=b"\x37\xfa\x21\x3d")
    assert frame == bytes.fromhex("8185 37fa213d 7f9f4d5158")


def test_encode_frame_medium_length_header():
    data = b"a" * 200
    frame = encode_frame(data, mask=b"\x00\x00\x00\x00")
    assert frame[0] == 0x81
    assert frame[1] == 0x80 | 126
    assert int.from_bytes(frame[2:4], "big") == len(data)
    assert frame[8:] == data
    assert len(frame) == 2 + 2 + 4 + len(data)


def test_encode_frame_long_length_header():
    data = b"z" * 70000
    frame = encode_frame(data, mask=b"\x00\x00\x00\x00")
    assert frame[1] == 0x80 | 127
    assert int.from_bytes(frame[2:10], "big") == len(data)
    assert len(frame) == 2 + 8 + 4 + len(data)


def test_encode_frame_random_mask_is_embedded():
    frame = encode_frame(b"abc")
    assert len(frame) == 2 + 4 + 3


def test_encode_frame_rejects_empty_data():
    with pytest.raises(ValueError):
        encode_frame(b"")


def test_encode_frame_rejects_bad_mask():
    with pytest.raises(ValueError):
        encode_frame(b"abc", mask=b"\x01\x02")


def test_generated_key_is_base64_of_16_bytes():
    key = generate_sec_ws_key()
    assert len(base64.b64decode(key)) == 16
    assert generate_sec_ws_key() != key


def test_generate_headers():
    assert generate_headers(["A: 1", "B: 2"]) == "A: 1\r\nB: 2\r\n\r\n"
    assert generate_headers([]) == "\r\n"


def test_connect_and_echo_round_trip():
    server = _EchoServer()
    with WebSocketClient("127.0.0.1", server.port) as client:
        client.connect()
        assert client.is_connected()
        client.send(b"hello")
        assert client.receive() == b"hello"
    assert not client.is_connected()


@pytest.mark.parametrize("size", [125, 126, 200, 70000])
def test_round_trip_sizes(size):
    server = _EchoServer()
    payload = bytes(i % 251 for i in range(size))
    with WebSocketClient("127.0.0.1", server.port) as client:
        client.connect()
        client.send(payload)
        assert client.receive() == payload


def test_send_returns_frame_size_and_accepts_text():
    server = _EchoServer()
    with WebSocketClient("127.0.0.1", server.port) as client:
        client.connect()
        assert client.send("hi") == 2 + 4 + 2
        assert client.receive() == b"hi"


def test_handshake_request_headers():
    server = _EchoServer()
    with WebSocketClient("127.0.0.1", server.port) as client:
        client.connect()
    request = server.request.decode()
    assert request.startswith("GET / HTTP/1.1\r\n")
    assert f"Host: 127.0.0.1:{server.port}\r\n" in request
    assert "Sec-WebSocket-Version: 13\r\n" in request


def test_connect_twice_fails():
    server = _EchoServer()
    with WebSocketClient("127.0.0.1", server.port) as client:
        client.connect()
        with pytest.raises(WebSocketError):
            client.connect()


def test_bad_accept_key_is_rejected():
    server = _EchoServer(accept="bogus")
    client = WebSocketClient("127.0.0.1", server.port)
    with pytest.raises(WebSocketError):
        client.connect()
    assert not client.is_connected()


def test_non_101_response_is_rejected():
    server = _EchoServer(status_line="HTTP/1.1 400 Bad Request")
    client = WebSocketClient("127.0.0.1", server.port)
    with pytest.raises(WebSocketError):
        client.connect()
    assert not client.is_connected()


def test_connection_refused():
    client = WebSocketClient("127.0.0.1", _closed_port())
    with pytest.raises(WebSocketError):
        client.connect()
    assert not client.is_connected()


def test_send_without_connection_fails():
    client = WebSocketClient("127.0.0.1", 1)
    with pytest.raises(WebSocketError):
        client.send(b"data")
    with pytest.raises(WebSocketError):
        client.send(b"data", force=True)


def test_send_empty_fails():
    server = _EchoServer()
    with WebSocketClient("127.0.0.1", server.port) as client:
        client.connect()
        with pytest.raises(WebSocketError):
            client.send(b"")