"""Threaded TCP server answering every request with a fixed plain-text response."""

from __future__ import annotations

import argparse
import socket
import sys
import threading
from collections.abc import Iterable

from wsproxy.response import Response

BACKLOG = 3
READ_SIZE = 1024
DEFAULT_PORTS = (3000,)


class ApiHandler:
    """Listens on a set of ports and answers each client with ``Hello, World!``."""

    def __init__(self, ports: Iterable[int]) -> None:
        self.ports = list(ports)

    def handle_client(self, conn: socket.socket, address) -> None:
        """Read one request from ``conn``, reply and close the connection."""
        with conn:
            data = conn.recv(READ_SIZE)
            if not data:
                return
            response = Response(200)
            response.content = "Hello, World!"
            conn.sendall(response.export().encode())
            host, port = address[:2]
            print(f"Response sent to client: {host}:{port}")

    def start_port(self, port: int) -> None:
        """Listen on ``port`` forever, serving each client on its own thread."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server:
            server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            if hasattr(socket, "SO_REUSEPORT"):
                server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
            server.bind(("", port))
            server.listen(BACKLOG)
            print(f"Server listening on port {port}")
            while True:
                try:
                    conn, address = server.accept()
                except OSError as exc:
                    print(f"accept: {exc}", file=sys.stderr)
                    continue
                threading.Thread(
                    target=self.handle_client, args=(conn, address), daemon=True
                ).start()
                print(f"Accepted connection from {address[0]}:{address[1]}")

    def run(self) -> None:
        """Serve every configured port, each on its own thread, until they end."""
        threads = [
            threading.Thread(target=self.start_port, args=(port,), daemon=True)
            for port in self.ports
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()


def main(argv: list[str] | None = None) -> int:
    """Start the API handler on the given ports (3000 by default)."""
    parser = argparse.ArgumentParser(description="Serve a fixed plain-text response.")
    parser.add_argument("ports", nargs="*", type=int, default=list(DEFAULT_PORTS))
    args = parser.parse_args(argv)
    ApiHandler(args.ports).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())