from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

MAX_PENDING_CONFIRMATIONS = 50


@dataclass(frozen=True)
class PendingConfirmation:
    action: str
    player_id: Optional[str]
    requester_id: int


class PendingConfirmations:
    """
    Confirmation prompts waiting for a reaction, keyed by message ID.

    Each member has at most one open prompt: asking again replaces the
    previous one. The oldest prompts are dropped past `max_size`.
    """

    def __init__(self, max_size: int = MAX_PENDING_CONFIRMATIONS) -> None:
        self._max_size = max_size
        self._by_message: Dict[int, PendingConfirmation] = {}

    def __len__(self) -> int:
        return len(self._by_message)

    def add(self, message_id: int, confirmation: PendingConfirmation) -> None:
        stale = [
            mid
            for mid, pending in self._by_message.items()
            if pending.requester_id == confirmation.requester_id
        ]
        for mid in stale:
            del self._by_message[mid]

        self._by_message[message_id] = confirmation
        while len(self._by_message) > self._max_size:
            oldest = next(iter(self._by_message))
            del self._by_message[oldest]

    def get(self, message_id: int) -> Optional[PendingConfirmation]:
        return self._by_message.get(message_id)

    def pop(self, message_id: int) -> Optional[PendingConfirmation]:
        return self._by_message.pop(message_id, None)
