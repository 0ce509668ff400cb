from __future__ import annotations

import uuid
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .errors import ValidationError
from .models import DEFAULT_NOTE, PaymentNote, Player

UPDATABLE_FIELDS = ("final_chips", "default_note")


def new_id() -> str:
    return uuid.uuid4().hex


class PlayerRegistry:
    """
    Players seated for the session, kept in registration order.

    Names are unique case-insensitively among the players currently
    registered. A removed player's name may be registered again.
    """

    def __init__(
        self,
        players: Iterable[Player] = (),
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self._players: Dict[str, Player] = {p.id: p for p in players}
        self._id_factory = id_factory

    def players(self) -> List[Player]:
        return list(self._players.values())

    def get(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def find_by_name(self, name: str) -> Optional[Player]:
        """Return the player whose name matches `name` ignoring case, if any."""

        key = name.strip().lower()
        for player in self._players.values():
            if player.name.lower() == key:
                return player
        return None

    def add_player(self, name: str) -> Player:
        name = name.strip()
        if not name:
            raise ValidationError("Player name cannot be empty.")
        if self.find_by_name(name) is not None:
            raise ValidationError("Name already exists.")

        player = Player(
            id=self._id_factory(),
            name=name,
            final_chips="",
            default_note=DEFAULT_NOTE,
        )
        self._players[player.id] = player
        return player

    def remove_player(self, player_id: str) -> Optional[Player]:
        """Delete the player record. Returns the removed player, or None."""

        return self._players.pop(player_id, None)

    def update_player(self, player_id: str, patch: Mapping[str, Any]) -> Optional[Player]:
        """
        Merge `patch` into the player's record.

        Only `final_chips` and `default_note` may be patched. The patch is
        validated as a whole before anything is applied. Returns the updated
        player, or None if `player_id` is unknown.
        """

        unknown = sorted(set(patch) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(unknown)}.")

        changes: Dict[str, str] = {}
        if "final_chips" in patch:
            value = patch["final_chips"]
            changes["final_chips"] = "" if value is None else str(value)
        if "default_note" in patch:
            changes["default_note"] = _normalize_note(patch["default_note"])

        player = self._players.get(player_id)
        if player is None:
            return None

        for field_name, value in changes.items():
            setattr(player, field_name, value)
        return player

    def clear(self) -> None:
        self._players.clear()


def _normalize_note(value: Any) -> str:
    if isinstance(value, PaymentNote):
        return value.value
    text = str(value).strip()
    for note in PaymentNote:
        if note.value.lower() == text.lower():
            return note.value
    choices = ", ".join(n.value for n in PaymentNote)
    raise ValidationError(f"Note must be one of: {choices}.")
