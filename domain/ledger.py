from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional

from .models import BuyInEvent
from .registry import PlayerRegistry, new_id
from .settlement import to_number


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BuyInLedger:
    """
    Append-only log of buy-ins.

    Events are kept in insertion (chronological) order. Display order is
    newest first and is produced by `for_display()` only.
    """

    def __init__(
        self,
        registry: PlayerRegistry,
        events: Iterable[BuyInEvent] = (),
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._registry = registry
        self._events: List[BuyInEvent] = list(events)
        self._id_factory = id_factory
        self._clock = clock

    def events(self) -> List[BuyInEvent]:
        return list(self._events)

    def for_display(self) -> List[BuyInEvent]:
        return list(reversed(self._events))

    def add_buy_in(self, player_id: str, amount: Any) -> Optional[BuyInEvent]:
        """
        Record a buy-in for `player_id`.

        Unknown players are ignored and None is returned. The player's
        current name and default note are copied onto the event.
        """

        player = self._registry.get(player_id)
        if player is None:
            return None

        timestamp = self._clock()
        # Timestamps never go backwards relative to insertion order.
        if self._events and timestamp < self._events[-1].timestamp:
            timestamp = self._events[-1].timestamp

        event = BuyInEvent(
            id=self._id_factory(),
            timestamp=timestamp,
            player_id=player.id,
            player_name=player.name,
            amount=to_number(amount),
            note=player.default_note or "",
        )
        self._events.append(event)
        return event

    def remove_events_for_player(self, player_id: str) -> int:
        """Delete every event referencing `player_id`. Returns how many were removed."""

        kept = [e for e in self._events if e.player_id != player_id]
        removed = len(self._events) - len(kept)
        self._events = kept
        return removed

    def clear_all(self) -> None:
        self._events = []
