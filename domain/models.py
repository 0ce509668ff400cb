from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Union

Number = Union[int, float]


class PaymentNote(str, Enum):
    """How a player settles their buy-ins with the banker."""

    CASH = "Cash"
    TRANSFER = "Transfer"
    OTHER = "Other"


DEFAULT_NOTE = PaymentNote.CASH.value


@dataclass
class Player:
    """
    A player seated for the current session.

    `final_chips` is the raw chip count typed in at the end of the night and
    stays a string until settlement coerces it. `default_note` is copied onto
    every buy-in recorded for the player afterwards.
    """

    id: str
    name: str
    final_chips: str = ""
    default_note: str = DEFAULT_NOTE


@dataclass(frozen=True)
class BuyInEvent:
    """
    A single buy-in recorded against a player.

    `player_name` and `note` are snapshots taken when the event was created
    and are never re-derived from the live player record.
    """

    id: str
    timestamp: datetime
    player_id: str
    player_name: str
    amount: Number
    note: str


@dataclass
class SettlementRow:
    """Derived end-of-session figures for one player."""

    player_id: str
    player_name: str
    final_chips: str
    total_buy_ins: Number
    rounded_chips: int
    profit_loss: Number

    @property
    def is_loss(self) -> bool:
        return self.profit_loss < 0
