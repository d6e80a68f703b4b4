from spalink.transports.websocket.transport import WebSocketTransport, build_ws_url, redact_url

__all__ = ["WebSocketTransport", "build_ws_url", "redact_url"]
