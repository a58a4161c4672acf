"""A small WebSocket client that sends masked text frames."""

from __future__ import annotations

import base64
import hashlib
import os
import socket
from collections.abc import Iterable

ACCEPT_GUID = "258EAFA5-E914-47DA-95CA-C5AB0DC85B11"
FIN_TEXT = 0x81
MASK_BIT = 0x80
HANDSHAKE_LIMIT = 4095


class WebSocketError(Exception):
    """Raised when connecting, the handshake, sending or receiving fails."""


def generate_sec_ws_key() -> str:
    """Return a fresh base64-encoded 16-byte handshake key."""
    return base64.b64encode(os.urandom(16)).decode("ascii")


def generate_headers(headers: Iterable[str]) -> str:
    """Join header lines with CRLF and terminate the block with a blank line."""
    return "".join(f"{header}\r\n" for header in headers) + "\r\n"


def compute_accept_key(key: str) -> str:
    """Return the ``Sec-WebSocket-Accept`` value expected for ``key``."""
    digest = hashlib.sha1((key + ACCEPT_GUID).encode("ascii")).digest()
    return base64.b64encode(digest).decode("ascii")


def encode_frame(data: bytes, mask: bytes | None = None) -> bytes:
    """Build a single masked FIN text frame carrying ``data``."""
    data = bytes(data)
    if not data:
        raise ValueError("no data to send")
    if mask is None:
        mask = os.urandom(4)
    elif len(mask) != 4:
        raise ValueError("mask must be exactly 4 bytes")
    length = len(data)
    if length <= 125:
        header = bytes([FIN_TEXT, MASK_BIT | length])
    elif length <= 0xFFFF:
        header = bytes([FIN_TEXT, MASK_BIT | 126]) + length.to_bytes(2, "big")
    else:
        header = bytes([FIN_TEXT, MASK_BIT | 127]) + length.to_bytes(8, "big")
    masked = bytes(byte ^ mask[i % 4] for i, byte in enumerate(data))
    return header + bytes(mask) + masked


class WebSocketClient:
    """Client side of a WebSocket connection over plain TCP."""

    def __init__(self, host: str, port: int) -> None:
        self.host = host
        self.port = port
        self._sock: socket.socket | None = None
        self._connected = False

    def __enter__(self) -> WebSocketClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def connect(self) -> None:
        """Open the TCP connection and perform the opening handshake."""
        if self._connected:
            raise WebSocketError("already connected")
        try:
            infos = socket.getaddrinfo(
                self.host, self.port, socket.AF_INET, socket.SOCK_STREAM
            )
        except socket.gaierror as exc:
            raise WebSocketError("failed to resolve host") from exc
        family, sock_type, proto, _, address = infos[0]
        sock = socket.socket(family, sock_type, proto)
        try:
            sock.connect(address)
            self._perform_handshake(sock)
        except OSError as exc:
            sock.close()
            raise WebSocketError(f"connection failed: {exc}") from exc
        except WebSocketError:
            sock.close()
            raise
        self._sock = sock
        self._connected = True
        print(f"[WebSocket] Connected to {self.host}:{self.port}")

    def _perform_handshake(self, sock: socket.socket) -> None:
        key = generate_sec_ws_key()
        print(f"[perform_handshake] Generated random key: {key}")
        host = self.host if self.port in (80, 443) else f"{self.host}:{self.port}"
        request = "GET / HTTP/1.1\r\n" + generate_headers(
            [
                f"Host: {host}",
                "Upgrade: websocket",
                "Connection: Upgrade",
                f"Sec-WebSocket-Key: {key}",
                "Sec-WebSocket-Version: 13",
            ]
        )
        print(f"Sending handshake request:\n{request}")
        sock.sendall(request.encode("ascii"))

        received = b""
        while b"\r\n\r\n" not in received and len(received) < HANDSHAKE_LIMIT:
            chunk = sock.recv(HANDSHAKE_LIMIT - len(received))
            if not chunk:
                break
            received += chunk
        if not received:
            raise WebSocketError("failed to receive handshake response")
        response = received.decode("latin-1")
        print(f"Received handshake response:\n{response}")

        if "HTTP/1.1 101 Switching Protocols" not in response:
            raise WebSocketError("handshake failed - expected 101 response")
        if f"Sec-WebSocket-Accept: {compute_accept_key(key)}" not in response:
            raise WebSocketError("invalid Sec-WebSocket-Accept header")

    def send(self, data: bytes | str, force: bool = False) -> int:
        """Send ``data`` as one masked text frame; return the frame size in bytes."""
        if not self._connected and not force:
            raise WebSocketError("not connected to server")
        if isinstance(data, str):
            data = data.encode("utf-8")
        if not data:
            raise WebSocketError("no data to send")
        if self._sock is None:
            raise WebSocketError("no open socket")
        frame = encode_frame(data)
        print("Sending frame: " + " ".join(f"{byte:02x}" for byte in frame))
        try:
            self._sock.sendall(frame)
        except OSError as exc:
            raise WebSocketError(f"failed to send data: {exc}") from exc
        print(f"[send] Sent {len(frame)} bytes (payload: {len(data)} bytes)")
        return len(frame)

    def _recv_exact(self, size: int) -> bytes:
        if self._sock is None:
            raise WebSocketError("no open socket")
        chunks = bytearray()
        while len(chunks) < size:
            chunk = self._sock.recv(size - len(chunks))
            if not chunk:
                raise WebSocketError("connection closed while receiving")
            chunks.extend(chunk)
        return bytes(chunks)

    def receive(self) -> bytes:
        """Read one frame and return its (unmasked) payload."""
        header = self._recv_exact(2)
        length = header[1] & 0x7F
        if length == 126:
            length = int.from_bytes(self._recv_exact(2), "big")
        elif length == 127:
            length = int.from_bytes(self._recv_exact(8), "big")
        mask = self._recv_exact(4) if header[1] & MASK_BIT else None
        payload = self._recv_exact(length) if length else b""
        if mask is None:
            return payload
        return bytes(byte ^ mask[i % 4] for i, byte in enumerate(payload))

    def is_connected(self) -> bool:
        """Whether the handshake has completed and the client is not closed."""
        return self._connected

    def close(self) -> None:
        """Close the socket, if open."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None
        self._connected = False