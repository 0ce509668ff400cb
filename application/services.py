from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, List, Mapping, Optional

from application import snapshot
from domain.errors import StorageError, ValidationError
from domain.ledger import BuyInLedger, utc_now
from domain.models import BuyInEvent, Player, SettlementRow
from domain.registry import PlayerRegistry, new_id
from domain.repositories import LOG_SLOT, PLAYERS_SLOT, SnapshotStore
from domain.settlement import settle

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    """
    Generic result type for session operations.

    `success` is False when the operation was rejected (`error_message` is
    set) or not confirmed (`error_message` is None). `warnings` carries
    non-fatal problems such as a failed snapshot write; the in-memory state
    has still changed in that case.
    """

    success: bool
    error_message: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    player: Optional[Player] = None
    event: Optional[BuyInEvent] = None


class LedgerSession:
    """
    The players and buy-in log of one session, plus its snapshot store.

    The caller owns the session: create it with `load()` at startup, mutate
    it through the operations below, and clear it with `clear_session()`.
    Every mutation writes the affected collection back to its slot in full.
    """

    def __init__(
        self,
        store: SnapshotStore,
        players: Iterable[Player] = (),
        events: Iterable[BuyInEvent] = (),
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self.registry = PlayerRegistry(players, id_factory=id_factory)
        self.ledger = BuyInLedger(
            self.registry,
            events,
            id_factory=id_factory,
            clock=clock,
        )

    @classmethod
    def load(
        cls,
        store: SnapshotStore,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utc_now,
    ) -> "LedgerSession":
        """
        Restore a session from `store`.

        A missing slot means an empty collection. Raises `StorageError` if a
        slot cannot be read or holds malformed data.
        """

        players_payload = store.read(PLAYERS_SLOT)
        log_payload = store.read(LOG_SLOT)

        players = snapshot.load_players(players_payload) if players_payload else []
        events = snapshot.load_log(log_payload) if log_payload else []

        logger.info("Loaded session with %d player(s) and %d buy-in(s)", len(players), len(events))
        return cls(store, players, events, id_factory=id_factory, clock=clock)

    # Read access -------------------------------------------------------

    def players(self) -> List[Player]:
        return self.registry.players()

    def log(self) -> List[BuyInEvent]:
        """Buy-ins, most recent first."""

        return self.ledger.for_display()

    def settlement(self) -> List[SettlementRow]:
        return settle(self.registry.players(), self.ledger.events())

    def find_player(self, name: str) -> Optional[Player]:
        return self.registry.find_by_name(name)

    # Mutations ---------------------------------------------------------

    def add_player(self, name: str) -> OperationResult:
        try:
            player = self.registry.add_player(name)
        except ValidationError as exc:
            return OperationResult(success=False, error_message=str(exc))

        logger.info("Added player %s (%s)", player.name, player.id)
        warnings = self._persist(players=True)
        return OperationResult(success=True, warnings=warnings, player=player)

    def remove_player(self, player_id: str, confirmed: bool) -> OperationResult:
        """
        Remove a player and every buy-in recorded for them.

        Nothing happens unless `confirmed` is true. Unknown ids are a no-op.
        """

        if not confirmed:
            return OperationResult(success=False)

        player = self.registry.get(player_id)
        if player is None:
            return OperationResult(success=True)

        removed_events = self.ledger.remove_events_for_player(player_id)
        self.registry.remove_player(player_id)
        logger.info("Removed player %s and %d buy-in(s)", player.name, removed_events)

        warnings = self._persist(players=True, log=True)
        return OperationResult(success=True, warnings=warnings, player=player)

    def update_player(self, player_id: str, patch: Mapping[str, Any]) -> OperationResult:
        try:
            player = self.registry.update_player(player_id, patch)
        except ValidationError as exc:
            return OperationResult(success=False, error_message=str(exc))

        if player is None:
            return OperationResult(success=True)

        warnings = self._persist(players=True)
        return OperationResult(success=True, warnings=warnings, player=player)

    def add_buy_in(self, player_id: str, amount: Any) -> OperationResult:
        """
        Record a buy-in. A buy-in for an unknown player is ignored; the
        result is still successful but carries no `event`.
        """

        event = self.ledger.add_buy_in(player_id, amount)
        if event is None:
            logger.debug("Ignored buy-in for unknown player %s", player_id)
            return OperationResult(success=True)

        logger.info("%s bought in %s (%s)", event.player_name, event.amount, event.note)
        warnings = self._persist(log=True)
        return OperationResult(success=True, warnings=warnings, event=event)

    def clear_session(self, confirmed: bool) -> OperationResult:
        """Drop all players and buy-ins and remove both snapshot slots."""

        if not confirmed:
            return OperationResult(success=False)

        self.registry.clear()
        self.ledger.clear_all()
        logger.info("Session cleared")

        warnings = []
        for slot in (PLAYERS_SLOT, LOG_SLOT):
            try:
                self._store.remove(slot)
            except StorageError as exc:
                warnings.append(self._storage_warning(slot, exc))
        return OperationResult(success=True, warnings=warnings)

    # Persistence -------------------------------------------------------

    def _persist(self, players: bool = False, log: bool = False) -> List[str]:
        writes = []
        if players:
            writes.append((PLAYERS_SLOT, snapshot.dump_players(self.registry.players())))
        if log:
            writes.append((LOG_SLOT, snapshot.dump_log(self.ledger.events())))

        warnings = []
        for slot, payload in writes:
            try:
                self._store.write(slot, payload)
            except StorageError as exc:
                warnings.append(self._storage_warning(slot, exc))
        return warnings

    @staticmethod
    def _storage_warning(slot: str, exc: StorageError) -> str:
        logger.warning("Could not save %s: %s", slot, exc)
        return "Changes were applied but could not be saved."
