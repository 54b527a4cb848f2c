"""Enumerations used by the session domain."""

from __future__ import annotations

from enum import StrEnum


class CardType(StrEnum):
    """Card kinds a player may hold."""

    INFANTRY = "infantry"
    CAVALRY = "cavalry"
    ARTILLERY = "artillery"
    WILD = "wild"


class SessionStatus(StrEnum):
    """Lifecycle states of a tracked session."""

    ACTIVE = "active"
    FINISHED = "finished"
