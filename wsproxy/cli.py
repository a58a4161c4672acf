"""Command that connects to a WebSocket server and keeps sending greetings."""

from __future__ import annotations

import argparse
import itertools
import sys
import time

from wsproxy.wsclient import WebSocketClient, WebSocketError


def main(argv: list[str] | None = None) -> int:
    """Send ``Hello World <n>`` messages until sending fails or the count is reached."""
    parser = argparse.ArgumentParser(description="Send numbered greetings over WebSocket.")
    parser.add_argument("--host", default="localhost")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("--interval", type=float, default=0.001,
                        help="seconds to wait between messages")
    parser.add_argument("--count", type=int, default=None,
                        help="stop after this many messages (default: never)")
    args = parser.parse_args(argv)

    client = WebSocketClient(args.host, args.port)
    try:
        client.connect()
    except WebSocketError as exc:
        print(f"Failed to connect to WebSocket server: {exc}", file=sys.stderr)
        return 1

    counters = itertools.count(1) if args.count is None else range(1, args.count + 1)
    with client:
        for counter in counters:
            message = f"Hello World {counter}"
            try:
                client.send(message.encode())
            except WebSocketError as exc:
                print(f"Failed to send message: {exc}", file=sys.stderr)
                break
            print(f"Sent: {message}")
            time.sleep(args.interval)
    return 0


if __name__ == "__main__":
    sys.exit(main())