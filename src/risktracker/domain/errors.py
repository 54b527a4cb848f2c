"""Error kinds signalled by the session repository."""

from __future__ import annotations


class SessionError(Exception):
    """Base class for every repository failure."""


class NotFoundError(SessionError, LookupError):
    """A referenced session, player or catalog territory does not exist."""


class ConflictError(SessionError):
    """The mutation would break territory ownership uniqueness."""


class InvalidStateError(SessionError, ValueError):
    """The operation is impossible given the current data."""
