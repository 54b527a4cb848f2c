"""Session repository: validated mutations over the stored session collection.

Every mutating operation follows the same sequence:

1. load the whole collection from the :class:`RecordStore`;
2. locate the session (and player, where the operation names one);
3. validate the request against the current data;
4. apply the change in memory and recompute derived fields;
5. write the whole collection back and return the updated session.

Validation always precedes mutation, so a failed call never reaches step 5
and the stored collection is left untouched.  The sequence runs under a
single re-entrant lock held by the repository, which makes concurrent calls
on one repository instance take turns instead of overwriting each other.
Separate processes sharing the same blob are not coordinated.

Removing an absent card or territory and deleting an absent session are
silent no-ops so that clients may retry them freely.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable, Iterable
from uuid import uuid4

from risktracker.domain import catalog
from risktracker.domain import models as dm
from risktracker.domain.enums import CardType, SessionStatus
from risktracker.domain.errors import ConflictError, InvalidStateError, NotFoundError
from risktracker.repository import RecordStore

logger = logging.getLogger(__name__)


def new_identifier() -> str:
    """Return a fresh opaque identifier."""

    return uuid4().hex


class SessionRepository:
    """CRUD and rule-checked mutations for tracked sessions."""

    def __init__(
        self,
        store: RecordStore,
        *,
        id_factory: Callable[[], str] = new_identifier,
    ) -> None:
        self._store = store
        self._new_id = id_factory
        self._lock = threading.RLock()

    # ------------------------------------------------------------------ CRUD

    def create(self, draft: dm.SessionDraft) -> dm.Session:
        """Create and persist a new active session with the drafted players."""

        if not draft.players:
            raise InvalidStateError("no players")

        session_id = dm.SessionID(self._new_id())
        players = [
            dm.Player(id=dm.PlayerID(self._new_id()), name=spec.name, color=spec.color)
            for spec in draft.players
        ]
        session = dm.Session(
            id=session_id,
            name=draft.name,
            date=draft.date,
            status=SessionStatus.ACTIVE,
            players=players,
            current_turn=0,
        )
        with self._lock:
            sessions = self._store.load_all()
            sessions.append(session)
            self._store.save_all(sessions)
        logger.info("created session %s with %d players", session.id, len(players))
        return session

    def get(self, session_id: str) -> dm.Session | None:
        """Return the session with ``session_id`` or ``None``."""

        return next((s for s in self._store.load_all() if s.id == session_id), None)

    def list_all(self) -> list[dm.Session]:
        """Return every stored session in store order."""

        return self._store.load_all()

    def update(self, session: dm.Session) -> dm.Session:
        """Replace the stored session that shares ``session.id``.

        Owned territories are rebuilt from the catalog, keeping only their
        garrisons, and player points are recomputed from them.  The
        replacement is rejected when its turn index falls outside the roster,
        when one territory is held by two players, when a territory is not in
        the catalog, or when a garrison is negative.
        """

        replacement = copy.deepcopy(session)
        with self._lock:
            sessions = self._store.load_all()
            stored = self._require_session(sessions, replacement.id)
            self._check_turn_index(replacement)
            self._check_unique_ownership(replacement)
            self._rebuild_territories(replacement)
            sessions[sessions.index(stored)] = replacement
            self._store.save_all(sessions)
        logger.debug("replaced session %s", replacement.id)
        return replacement

    def delete(self, session_id: str) -> None:
        """Remove a session; unknown ids are ignored."""

        with self._lock:
            sessions = self._store.load_all()
            remaining = [s for s in sessions if s.id != session_id]
            self._store.save_all(remaining)
        if len(remaining) != len(sessions):
            logger.info("deleted session %s", session_id)

    def rename(self, session_id: str, name: str) -> dm.Session:
        def apply(session: dm.Session) -> None:
            if not name.strip():
                raise InvalidStateError("session name must not be empty")
            session.name = name

        return self._mutate(session_id, apply)

    # ----------------------------------------------------------------- cards

    def issue_card(self, session_id: str, player_id: str, card_type: CardType | str) -> dm.Session:
        """Append a new card of ``card_type`` to the player's hand."""

        kind = CardType(card_type)

        def apply(session: dm.Session) -> None:
            player = self._require_player(session, player_id)
            player.cards.append(dm.Card(id=dm.CardID(self._new_id()), type=kind))

        return self._mutate(session_id, apply)

    def remove_card(self, session_id: str, player_id: str, card_id: str) -> dm.Session:
        """Drop the card from the player's hand if it is there."""

        def apply(session: dm.Session) -> None:
            player = self._require_player(session, player_id)
            player.cards = [card for card in player.cards if card.id != card_id]

        return self._mutate(session_id, apply)

    # ----------------------------------------------------------- territories

    def assign_territory(self, session_id: str, player_id: str, territory_id: str) -> dm.Session:
        """Give a catalog territory to a player.

        Raises:
            NotFoundError: unknown session, player, or catalog territory
            ConflictError: some player in the session, including the target
                player, already holds the territory
        """

        def apply(session: dm.Session) -> None:
            player = self._require_player(session, player_id)
            entry = catalog.find(territory_id)
            if entry is None:
                raise NotFoundError(f"territory {territory_id} not found")
            if session.owner_of(entry.id) is not None:
                raise ConflictError(f"territory {territory_id} already assigned")
            player.territories.append(dm.OwnedTerritory.from_catalog(entry, player.id))
            player.recompute_points()

        return self._mutate(session_id, apply)

    def remove_territory(self, session_id: str, player_id: str, territory_id: str) -> dm.Session:
        """Return a territory to the unassigned pool; absent ids are ignored."""

        def apply(session: dm.Session) -> None:
            player = self._require_player(session, player_id)
            player.territories = [t for t in player.territories if t.id != territory_id]
            player.recompute_points()

        return self._mutate(session_id, apply)

    def set_territory_units(self, session_id: str, territory_id: str, units: int) -> dm.Session:
        """Overwrite the garrison of an owned territory.

        Territories nobody holds are left alone and the session is saved as is.
        """

        def apply(session: dm.Session) -> None:
            if units < 0:
                raise InvalidStateError("units must be non-negative")
            for player in session.players:
                territory = player.find_territory(dm.TerritoryID(territory_id))
                if territory is not None:
                    territory.units = units
                    return

        return self._mutate(session_id, apply)

    def list_available_territories(self, session_id: str) -> list[dm.CatalogTerritory]:
        """Catalog entries nobody in the session holds, in catalog order."""

        session = self._require_session(self._store.load_all(), session_id)
        taken = session.owned_territory_ids()
        return [entry for entry in catalog.list_all() if entry.id not in taken]

    # ------------------------------------------------------- status and turns

    def set_status(self, session_id: str, status: SessionStatus | str) -> dm.Session:
        new_status = SessionStatus(status)

        def apply(session: dm.Session) -> None:
            session.status = new_status

        return self._mutate(session_id, apply)

    def advance_turn(self, session_id: str) -> dm.Session:
        """Pass the turn to the next player, wrapping after the last one."""

        def apply(session: dm.Session) -> None:
            if not session.players:
                raise InvalidStateError("no players")
            session.current_turn = (session.current_turn + 1) % len(session.players)

        return self._mutate(session_id, apply)

    # ---------------------------------------------------------------- helpers

    def _mutate(self, session_id: str, apply: Callable[[dm.Session], None]) -> dm.Session:
        with self._lock:
            sessions = self._store.load_all()
            session = self._require_session(sessions, session_id)
            apply(session)
            self._store.save_all(sessions)
        logger.debug("updated session %s", session_id)
        return session

    @staticmethod
    def _require_session(sessions: Iterable[dm.Session], session_id: str) -> dm.Session:
        for session in sessions:
            if session.id == session_id:
                return session
        raise NotFoundError(f"session {session_id} not found")

    @staticmethod
    def _require_player(session: dm.Session, player_id: str) -> dm.Player:
        player = session.find_player(dm.PlayerID(player_id))
        if player is None:
            raise NotFoundError(f"player {player_id} not found")
        return player

    @staticmethod
    def _check_turn_index(session: dm.Session) -> None:
        limit = max(len(session.players), 1)
        if not 0 <= session.current_turn < limit:
            raise InvalidStateError(
                f"current turn {session.current_turn} outside roster of {len(session.players)}"
            )

    @staticmethod
    def _check_unique_ownership(session: dm.Session) -> None:
        seen: set[dm.TerritoryID] = set()
        for player in session.players:
            for territory in player.territories:
                if territory.id in seen:
                    raise ConflictError(f"territory {territory.id} already assigned")
                seen.add(territory.id)

    @staticmethod
    def _rebuild_territories(session: dm.Session) -> None:
        for player in session.players:
            rebuilt: list[dm.OwnedTerritory] = []
            for territory in player.territories:
                entry = catalog.find(territory.id)
                if entry is None:
                    raise NotFoundError(f"territory {territory.id} not found")
                if territory.units < 0:
                    raise InvalidStateError("units must be non-negative")
                owned = dm.OwnedTerritory.from_catalog(entry, player.id)
                owned.units = territory.units
                rebuilt.append(owned)
            player.territories = rebuilt
        for player in session.players:
            player.recompute_points()
