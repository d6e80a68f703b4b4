from spalink.storage.database import RANGE_MILLIS, ReadingStore

__all__ = ["RANGE_MILLIS", "ReadingStore"]
