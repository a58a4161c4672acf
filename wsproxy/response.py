"""Minimal plain-text HTTP response builder."""

from __future__ import annotations

CRLF = "\r\n"


class Response:
    """A plain-text HTTP/1.1 response assembled from a status, headers and content."""

    def __init__(self, status: int = 200, content: str = "") -> None:
        self.status_line = ""
        self.headers: list[str] = []
        self.content = content
        self.set_status(status)
        self.add_header("Content-Type: text/plain")

    def set_status(self, status: int) -> None:
        """Set the status line; the reason phrase is always ``OK``."""
        self.status_line = f"HTTP/1.1 {status} OK{CRLF}"

    def add_header(self, header: str) -> None:
        """Append a raw ``Name: value`` header line."""
        self.headers.append(header)

    def add_connection_close(self) -> None:
        """Append a ``Connection: close`` header."""
        self.add_header("Connection: close")

    def export(self, add_content_length: bool = False) -> str:
        """Render the full response text.

        With ``add_content_length`` a ``Content-Length`` header is included,
        unless the content is empty.
        """
        headers = list(self.headers)
        if add_content_length and self.content:
            headers.append(f"Content-Length: {len(self.content.encode())}")
        header_block = "".join(f"{header}{CRLF}" for header in headers)
        return f"{self.status_line}{header_block}{CRLF}{self.content}"