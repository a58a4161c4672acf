# wsproxy

wsproxy has two parts:

- a WebSocket client (`wsproxy.wsclient`) that connects over plain TCP,
  performs the opening handshake, checks the `Sec-WebSocket-Accept` reply
  and sends masked text frames;
- a minimal HTTP responder (`wsproxy.server`) that listens on one or more
  ports and answers every request with a plain-text `Hello, World!`.

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Commands

### `wsproxy`

This command connects to a WebSocket server. It then sends `Hello World 1`,
`Hello World 2` and so on, one text frame per message, and prints each
frame in hex along with a `Sent: ...` line.

```
wsproxy [--host HOST] [--port PORT] [--interval SECONDS] [--count N]
```

- `--host` is the server host. The default is `localhost`.
- `--port` is the server port. The default is `5000`.
- `--interval` sets the pause between messages in seconds. The default is
  `0.001`.
- `--count` makes the command stop after this many messages. By default
  the command never stops on its own.

The command exits with status 1 if it cannot connect. If a send fails, it
reports the failure, stops sending and exits with status 0.

### `wsproxy-server`

```
wsproxy-server [PORT ...]
```

This command listens on each given port, or on port 3000 if no port is
given. Each port is served on its own thread, and so is each client.
The server reads up to 1024 bytes from a client and replies with a
`200 OK` plain-text response whose body is `Hello, World!`. It then closes
the connection.

## Library use

```python
from wsproxy.wsclient import WebSocketClient, WebSocketError

with WebSocketClient("localhost", 5000) as client:
    try:
        client.connect()
        client.send(b"Hello World")   # returns the frame size in bytes
        reply = client.receive()       # payload of one frame, unmasked
    except WebSocketError as exc:
        print("failed:", exc)
```

`WebSocketClient` has the following methods:

- `connect()`: opens the connection and performs the handshake. It raises
  `WebSocketError` if the client is already connected, if the host cannot
  be resolved, or if the connection or handshake fails.
- `send(data, force=False)`: sends `bytes` or `str` as one masked text
  frame. It raises `WebSocketError` if the client is not connected (unless
  `force` is set), if `data` is empty, or if sending fails.
- `receive()`: reads one frame and returns its payload. It raises
  `WebSocketError` if the connection closes partway through the frame.
- `is_connected()`: returns whether the handshake has completed.
- `close()`: closes the socket. Leaving a `with` block also closes it.

The module also provides these helpers:

- `generate_sec_ws_key()` returns a random base64 `Sec-WebSocket-Key`.
- `compute_accept_key(key)` returns the `Sec-WebSocket-Accept` value that
  a server should send back for `key`.
- `encode_frame(data, mask=None)` builds a masked FIN text frame. If no
  mask is given, it uses a random 4-byte mask. It raises `ValueError` for
  empty data or for a mask that is not 4 bytes long.
- `generate_headers(headers)` joins header lines with CRLF and adds the
  blank line that ends the block.

To build an HTTP response by hand, use `wsproxy.response.Response`:

```python
from wsproxy.response import Response

response = Response(200, content="Hello, World!")
response.add_connection_close()
raw = response.export(True)  # adds Content-Length when content is non-empty
```

The reason phrase is always `OK`, and `Content-Type: text/plain` is always
present.

To serve ports from code, use `wsproxy.server.ApiHandler`:

```python
from wsproxy.server import ApiHandler

ApiHandler([3000, 3001]).run()
```

## What it does not do

- The package does not proxy anything. The client only sends text frames,
  and the server only returns a fixed response. Nothing connects the two.
- The client does not support `wss://`/TLS, fragmented messages, or
  ping, pong and close control frames. `receive()` returns the payload of
  whatever single frame arrives, whatever its type.
- The server does not parse requests or route them. Every request gets the
  same response, whatever it contains.