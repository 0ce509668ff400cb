from __future__ import annotations


def encode_quick_buy_in(player_id: str, amount: int) -> str:
    """
    Encode a quick buy-in button.

    Format: buy:{player_id}:{amount}
    """

    return f"buy:{player_id}:{amount}"


def parse_quick_buy_in(data: str) -> tuple[str, int]:
    parts = data.split(":")
    if len(parts) != 3 or parts[0] != "buy":
        raise ValueError(f"Invalid quick buy-in callback data: {data}")

    player_id = parts[1]
    amount = int(parts[2])
    return player_id, amount


def encode_remove_confirmation(player_id: str, requester_id: int, accepted: bool) -> str:
    """
    Encode a remove-player confirmation/decline callback.

    Format:
      rm:yes:{player_id}:{requester_id}
      rm:no:{player_id}:{requester_id}
    """

    answer = "yes" if accepted else "no"
    return f"rm:{answer}:{player_id}:{requester_id}"


def parse_remove_confirmation(data: str) -> tuple[bool, str, int]:
    parts = data.split(":")
    if len(parts) != 4 or parts[0] != "rm" or parts[1] not in ("yes", "no"):
        raise ValueError(f"Invalid remove confirmation callback data: {data}")

    accepted = parts[1] == "yes"
    player_id = parts[2]
    requester_id = int(parts[3])
    return accepted, player_id, requester_id


def encode_clear_confirmation(requester_id: int, accepted: bool) -> str:
    """
    Encode a clear-session confirmation/decline callback.

    Format: clear:yes:{requester_id} or clear:no:{requester_id}
    """

    answer = "yes" if accepted else "no"
    return f"clear:{answer}:{requester_id}"


def parse_clear_confirmation(data: str) -> tuple[bool, int]:
    parts = data.split(":")
    if len(parts) != 3 or parts[0] != "clear" or parts[1] not in ("yes", "no"):
        raise ValueError(f"Invalid clear confirmation callback data: {data}")

    accepted = parts[1] == "yes"
    requester_id = int(parts[2])
    return accepted, requester_id
