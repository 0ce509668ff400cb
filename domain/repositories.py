from __future__ import annotations

from typing import Optional, Protocol

PLAYERS_SLOT = "pb_players"
LOG_SLOT = "pb_log"


class SnapshotStore(Protocol):
    """
    Abstraction over the local key-value store that holds session snapshots.

    The session keeps two named slots (`PLAYERS_SLOT` and `LOG_SLOT`), each
    holding one fully serialised collection. Implementations are responsible
    for:
    - Storing and returning payloads verbatim.
    - Hiding any SQL / driver details from the application layer.
    - Wrapping driver failures in `domain.errors.StorageError`.
    """

    def read(self, slot: str) -> Optional[str]:
        """Return the payload stored under `slot`, or None if the slot is absent."""

        ...

    def write(self, slot: str, payload: str) -> None:
        """Replace the payload stored under `slot`."""

        ...

    def remove(self, slot: str) -> None:
        """
        Delete `slot` entirely.

        Removing a slot that does not exist is not an error.
        """

        ...
