"""Service layer for the session tracker.

``SessionRepository`` is the only stateful service: it owns the record
store and applies the ownership, scoring and turn rules to every change.
"""

from risktracker.services.session_service import SessionRepository, new_identifier

__all__ = ["SessionRepository", "new_identifier"]
