from spalink.session.collector import CollectionSession, SessionState, SessionStateError
from spalink.session.scheduler import CollectionScheduler

__all__ = ["CollectionScheduler", "CollectionSession", "SessionState", "SessionStateError"]
