"""WebSocket text-frame client and a minimal multi-port HTTP responder."""

__version__ = "0.1.0"
__all__ = ["cli", "response", "server", "wsclient"]