"""
Argument parsing shared by the chat front-ends.

Player names may contain spaces, so commands that take a player and a value
treat the last word as the value and everything before it as the name.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from application.services import OperationResult


def split_name_and_value(args: str) -> Tuple[str, Optional[str]]:
    """
    Split "<name...> <value>" into its parts.

    Returns `(name, None)` when there is only one word.
    """

    parts = args.strip().rsplit(maxsplit=1)
    if len(parts) < 2:
        return args.strip(), None
    return parts[0], parts[1]


def split_name_and_amount(args: str) -> Tuple[str, Optional[str]]:
    """
    Split "<name...> [amount]".

    The last word is only taken as the amount if it looks like a number, so
    "/buyin Big Tony" asks for an amount instead of recording 0.
    """

    name, value = split_name_and_value(args)
    if value is None:
        return name, None
    try:
        float(value)
    except ValueError:
        return args.strip(), None
    return name, value


def command_args(text: str) -> str:
    """Drop the leading "/command" or "!command" word from a message."""

    parts = text.split(maxsplit=1)
    return parts[1] if len(parts) > 1 else ""


def result_lines(result: OperationResult, ok_text: str, failure_text: str) -> List[str]:
    """Lines to show the user for an operation result, warnings included."""

    if result.success:
        lines = [ok_text]
    else:
        lines = [result.error_message or failure_text]
    lines.extend(result.warnings)
    return lines
