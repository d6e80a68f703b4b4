from spalink.transports.base import EventKind, EventSink, SpaTransport, TransportEvent

__all__ = ["EventKind", "EventSink", "SpaTransport", "TransportEvent"]
