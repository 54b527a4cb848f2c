"""Dataclasses describing a tracked board-game session.

The engine only ever manipulates these plain objects.  Persistence adapters
convert them to and from the stored JSON document through a pydantic
``TypeAdapter``; the ``__pydantic_config__`` attached to each class maps the
snake_case attributes onto the camelCase keys of the persisted layout
(``ownerId``, ``currentTurn``).
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import NewType

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from .enums import CardType, SessionStatus

# --- Strongly typed identifiers -------------------------------------------------

SessionID = NewType("SessionID", str)
PlayerID = NewType("PlayerID", str)
CardID = NewType("CardID", str)
TerritoryID = NewType("TerritoryID", str)

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Reference data -------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CatalogTerritory:
    """Static territory definition (catalog entry)."""

    __pydantic_config__ = _CAMEL

    id: TerritoryID
    name: str
    points: int


# --- Session aggregate ----------------------------------------------------------


@dataclass(slots=True)
class OwnedTerritory:
    """A catalog territory held by a player, with its garrison."""

    __pydantic_config__ = _CAMEL

    id: TerritoryID
    name: str
    points: int
    owner_id: PlayerID
    units: int = 0

    @classmethod
    def from_catalog(cls, entry: CatalogTerritory, owner_id: PlayerID) -> OwnedTerritory:
        return cls(id=entry.id, name=entry.name, points=entry.points, owner_id=owner_id)


@dataclass(slots=True)
class Card:
    """Card in a player's hand."""

    __pydantic_config__ = _CAMEL

    id: CardID
    type: CardType


@dataclass(slots=True)
class Player:
    """Participant in a session.

    ``points`` is derived from ``territories``; call :meth:`recompute_points`
    after touching the territory list instead of assigning it directly.
    """

    __pydantic_config__ = _CAMEL

    id: PlayerID
    name: str
    color: str
    cards: list[Card] = field(default_factory=list)
    territories: list[OwnedTerritory] = field(default_factory=list)
    points: int = 0

    def find_card(self, card_id: CardID) -> Card | None:
        return next((card for card in self.cards if card.id == card_id), None)

    def find_territory(self, territory_id: TerritoryID) -> OwnedTerritory | None:
        return next((t for t in self.territories if t.id == territory_id), None)

    def recompute_points(self) -> int:
        self.points = sum(territory.points for territory in self.territories)
        return self.points


@dataclass(slots=True)
class Session:
    """Root aggregate: one tracked game."""

    __pydantic_config__ = _CAMEL

    id: SessionID
    name: str
    date: datetime.date
    status: SessionStatus = SessionStatus.ACTIVE
    players: list[Player] = field(default_factory=list)
    current_turn: int = 0

    def find_player(self, player_id: PlayerID) -> Player | None:
        return next((player for player in self.players if player.id == player_id), None)

    def owner_of(self, territory_id: TerritoryID) -> Player | None:
        """Return the player currently holding ``territory_id``, if any."""

        for player in self.players:
            if player.find_territory(territory_id) is not None:
                return player
        return None

    def owned_territory_ids(self) -> set[TerritoryID]:
        return {territory.id for player in self.players for territory in player.territories}

    def current_player(self) -> Player | None:
        """Player whose turn it is, or ``None`` when the roster has no such seat."""

        if not 0 <= self.current_turn < len(self.players):
            return None
        return self.players[self.current_turn]


# --- Creation inputs ------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PlayerDraft:
    """Name and colour of a player to seat in a new session."""

    name: str
    color: str


@dataclass(frozen=True, slots=True)
class SessionDraft:
    """Everything needed to create a session."""

    name: str
    date: datetime.date
    players: list[PlayerDraft] = field(default_factory=list)
