"""Domain layer for the session tracker.

This package holds the plain data types the engine operates on together with
the static territory catalog and the error taxonomy.  Nothing in here performs
I/O; persistence lives in :mod:`risktracker.repository` and the mutation rules
live in :mod:`risktracker.services`.
"""

from risktracker.domain import catalog, errors, models
from risktracker.domain.enums import CardType, SessionStatus

__all__ = ["CardType", "SessionStatus", "catalog", "errors", "models"]
