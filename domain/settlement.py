"""
Settlement rules: coercion of user-entered numbers, chip rounding and
profit/loss per player.

Everything here is a pure function of the players and the buy-in log and is
recomputed on every read.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Dict, Iterable, List

from .models import BuyInEvent, Number, Player, SettlementRow

CHIP_DENOMINATION = 10


def to_number(value: Any) -> Number:
    """
    Coerce user input to a number.

    Blank, missing and non-numeric input become 0, as do NaN and infinities.
    Integral values are returned as `int` so they serialise without a
    fractional part.
    """

    if value is None or isinstance(value, bool):
        return 0

    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        if not text or "_" in text:
            return 0
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return 0

    if isinstance(number, float):
        if not math.isfinite(number):
            return 0
        if number.is_integer():
            return int(number)
    return number


def round_to_nearest_ten(value: Any) -> int:
    """Round to the nearest multiple of ten, halves away from zero."""

    number = to_number(value)
    if isinstance(number, int):
        tens, remainder = divmod(abs(number), CHIP_DENOMINATION)
        if remainder * 2 >= CHIP_DENOMINATION:
            tens += 1
        return (tens if number >= 0 else -tens) * CHIP_DENOMINATION

    tens = Decimal(str(number)).scaleb(-1)
    with localcontext() as ctx:
        # Quantizing needs one digit of precision per integer digit.
        ctx.prec = max(28, tens.adjusted() + 2)
        return int(tens.quantize(Decimal(1), rounding=ROUND_HALF_UP)) * CHIP_DENOMINATION


def buy_in_totals(players: Iterable[Player], events: Iterable[BuyInEvent]) -> Dict[str, Number]:
    """Sum buy-ins per player id in a single pass over the log."""

    totals: Dict[str, Number] = {p.id: 0 for p in players}
    for event in events:
        totals[event.player_id] = totals.get(event.player_id, 0) + to_number(event.amount)
    return totals


def profit_loss(player: Player, total_buy_ins: Number) -> Number:
    return round_to_nearest_ten(player.final_chips) - total_buy_ins


def settle(players: Iterable[Player], events: Iterable[BuyInEvent]) -> List[SettlementRow]:
    """Return one settlement row per player, in registration order."""

    players = list(players)
    totals = buy_in_totals(players, events)

    rows = []
    for player in players:
        total = totals.get(player.id, 0)
        rounded = round_to_nearest_ten(player.final_chips)
        rows.append(
            SettlementRow(
                player_id=player.id,
                player_name=player.name,
                final_chips=player.final_chips,
                total_buy_ins=total,
                rounded_chips=rounded,
                profit_loss=profit_loss(player, total),
            )
        )
    return rows
