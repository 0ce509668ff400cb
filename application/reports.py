from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from domain.models import BuyInEvent, Number, SettlementRow
from domain.settlement import to_number

DEFAULT_CURRENCY = "RM"
QUICK_BUY_IN_AMOUNTS = (50, 100, 200)


def format_amount(value: Number, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount with thousands separators, e.g. RM1,250 or RM12.5."""

    number = to_number(value)
    if isinstance(number, float):
        text = f"{number:,.3f}".rstrip("0").rstrip(".")
    else:
        text = f"{number:,}"
    return f"{currency}{text}"


def format_profit_loss(value: Number, currency: str = DEFAULT_CURRENCY) -> str:
    sign = "+" if value >= 0 else ""
    return f"{sign}{format_amount(value, currency)}"


def format_event_time(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def render_event(event: BuyInEvent, currency: str = DEFAULT_CURRENCY) -> str:
    line = f"{event.player_name} bought in {format_amount(event.amount, currency)}"
    if event.note:
        line += f" ({event.note})"
    return f"{line} - {format_event_time(event.timestamp)}"


def render_log(events: List[BuyInEvent], currency: str = DEFAULT_CURRENCY) -> str:
    """Render buy-ins in the order given (callers pass display order)."""

    if not events:
        return "No buy-ins yet."
    return "\n".join(render_event(e, currency) for e in events)


def render_summary(
    rows: List[SettlementRow],
    currency: str = DEFAULT_CURRENCY,
    title: Optional[str] = "Summary",
) -> str:
    """
    Render the settlement table as plain text, one line per player.

    Raw final chips are shown as 0 until the player's count is entered.
    """

    if not rows:
        return "No players yet - add a few to start."

    lines = [title] if title else []
    for row in rows:
        lines.append(
            f"{row.player_name}: buy-ins {format_amount(row.total_buy_ins, currency)}"
            f" | final {row.final_chips or 0}"
            f" | rounded {row.rounded_chips}"
            f" | P/L {format_profit_loss(row.profit_loss, currency)}"
        )
    return "\n".join(lines)
