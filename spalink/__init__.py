from spalink.domain import Reading
from spalink.parsing.display import SpaState, classify, merge
from spalink.session import CollectionScheduler, CollectionSession
from spalink.storage import ReadingStore
from spalink.server_app import create_app, SpaSettings
from spalink.monitor import SpaMonitor
from importlib.metadata import PackageNotFoundError, version

__all__ = [
    "Reading",
    "SpaState",
    "classify",
    "merge",
    "CollectionSession",
    "CollectionScheduler",
    "ReadingStore",
    "create_app",
    "SpaSettings",
    "SpaMonitor",
]

try:
    __version__ = version("spalink")
except PackageNotFoundError:
    __version__ = "0.0.0"
