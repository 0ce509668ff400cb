"""
JSON encoding of the session snapshot.

Each collection is stored as a JSON array in its own slot. Field names are
stable and shared with snapshots written by earlier versions of the app:

    players: {"id", "name", "finalChips", "defaultNote"}
    log:     {"id", "ts", "playerId", "playerName", "amount", "note"}

`ts` is an ISO-8601 UTC instant, so snapshots sort correctly as text.
Events are written in chronological order.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List

from domain.errors import StorageError
from domain.models import DEFAULT_NOTE, BuyInEvent, Player


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="microseconds")
    return text.replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def player_to_dict(player: Player) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "finalChips": player.final_chips,
        "defaultNote": player.default_note,
    }


def player_from_dict(data: Dict[str, Any]) -> Player:
    final_chips = data.get("finalChips")
    return Player(
        id=str(data["id"]),
        name=data["name"],
        final_chips="" if final_chips is None else str(final_chips),
        default_note=data.get("defaultNote") or DEFAULT_NOTE,
    )


def event_to_dict(event: BuyInEvent) -> Dict[str, Any]:
    return {
        "id": event.id,
        "ts": format_timestamp(event.timestamp),
        "playerId": event.player_id,
        "playerName": event.player_name,
        "amount": event.amount,
        "note": event.note,
    }


def event_from_dict(data: Dict[str, Any]) -> BuyInEvent:
    amount = data.get("amount", 0)
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise ValueError(f"amount must be a number, got {amount!r}")
    return BuyInEvent(
        id=str(data["id"]),
        timestamp=parse_timestamp(data["ts"]),
        player_id=str(data["playerId"]),
        player_name=data["playerName"],
        amount=amount,
        note=data.get("note") or "",
    )


def dump_players(players: List[Player]) -> str:
    return json.dumps([player_to_dict(p) for p in players])


def dump_log(events: List[BuyInEvent]) -> str:
    return json.dumps([event_to_dict(e) for e in events])


def load_players(payload: str) -> List[Player]:
    try:
        return [player_from_dict(item) for item in _load_array(payload)]
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageError(f"Malformed players snapshot: {exc}") from exc


def load_log(payload: str) -> List[BuyInEvent]:
    try:
        events = [event_from_dict(item) for item in _load_array(payload)]
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageError(f"Malformed log snapshot: {exc}") from exc
    # Snapshots written newest-first are restored to insertion order; reversing
    # first keeps events that share a timestamp in the order they were created.
    if events and events[0].timestamp > events[-1].timestamp:
        events.reverse()
    return sorted(events, key=lambda e: e.timestamp)


def _load_array(payload: str) -> List[Dict[str, Any]]:
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError("expected a JSON array")
    return data
