from __future__ import annotations

import logging

import telebot
from telebot.types import InlineKeyboardButton, InlineKeyboardMarkup

from application.reports import (
    DEFAULT_CURRENCY,
    QUICK_BUY_IN_AMOUNTS,
    format_amount,
    render_log,
    render_summary,
)
from application.services import LedgerSession
from interfaces.commands import (
    command_args,
    result_lines,
    split_name_and_amount,
    split_name_and_value,
)
from interfaces.telegram.callback_data import (
    encode_clear_confirmation,
    encode_quick_buy_in,
    encode_remove_confirmation,
    parse_clear_confirmation,
    parse_quick_buy_in,
    parse_remove_confirmation,
)

logger = logging.getLogger(__name__)

NOT_REQUESTER_TEXT = "Only the member who asked can confirm."

HELP_TEXT = (
    "/add <name>                 - add a player\n"
    "/remove <name>              - remove a player and their buy-ins\n"
    "/buyin <name> [amount]      - record a buy-in (quick buttons if no amount)\n"
    "/note <name> <Cash|Transfer|Other> - set the default note for new buy-ins\n"
    "/chips <name> <count>       - enter final chips at the end\n"
    "/summary                    - buy-ins, rounded chips and P/L\n"
    "/log                        - buy-in log, newest first\n"
    "/clear                      - clear ALL players and logs\n"
)


def _yes_no_markup(yes_data: str, no_data: str) -> InlineKeyboardMarkup:
    markup = InlineKeyboardMarkup(row_width=2)
    markup.add(
        InlineKeyboardButton("yes", callback_data=yes_data),
        InlineKeyboardButton("no", callback_data=no_data),
    )
    return markup


def create_telegram_bot(
    bot_token: str,
    session: LedgerSession,
    currency: str = DEFAULT_CURRENCY,
) -> telebot.TeleBot:
    """
    Configure and return a TeleBot instance wired to the ledger session.

    This module contains only Telegram-specific concerns: parsing Telegram
    messages/callbacks and mapping them to/from session operations. The bot
    is not threaded so session operations never run concurrently.
    """

    bot = telebot.TeleBot(bot_token, threaded=False)

    def reply(chat_id, lines) -> None:
        bot.send_message(chat_id, "\n".join(lines))

    def lookup(message, name: str):
        if not name:
            bot.send_message(message.chat.id, "Please enter a player name.")
            return None
        player = session.find_player(name)
        if player is None:
            bot.send_message(message.chat.id, f"No player named {name}.")
        return player

    @bot.message_handler(commands=["start", "hello"])
    def handle_start(message):
        bot.send_message(
            message.chat.id,
            "Welcome to the buy-in ledger!\n"
            f"Banker-only - 1 chip = {currency}1 - round to nearest 10.\n"
            "Type /help to see available commands.",
        )

    @bot.message_handler(commands=["help"])
    def handle_help(message):
        bot.send_message(message.chat.id, HELP_TEXT)

    @bot.message_handler(commands=["add"])
    def handle_add(message):
        name = command_args(message.text)
        result = session.add_player(name)
        reply(message.chat.id, result_lines(result, f"Added {name.strip()}.", "Could not add player."))

    @bot.message_handler(commands=["remove"])
    def handle_remove(message):
        player = lookup(message, command_args(message.text).strip())
        if player is None:
            return

        bot.send_message(
            message.chat.id,
            f"Remove {player.name}? Their buy-ins will be deleted too.",
            reply_markup=_yes_no_markup(
                encode_remove_confirmation(player.id, message.from_user.id, accepted=True),
                encode_remove_confirmation(player.id, message.from_user.id, accepted=False),
            ),
        )

    @bot.message_handler(commands=["buyin"])
    def handle_buy_in(message):
        name, amount = split_name_and_amount(command_args(message.text))
        player = lookup(message, name)
        if player is None:
            return

        if amount is None:
            markup = InlineKeyboardMarkup(row_width=len(QUICK_BUY_IN_AMOUNTS))
            markup.add(
                *[
                    InlineKeyboardButton(
                        f"+{amt}",
                        callback_data=encode_quick_buy_in(player.id, amt),
                    )
                    for amt in QUICK_BUY_IN_AMOUNTS
                ]
            )
            bot.send_message(
                message.chat.id,
                f"Buy-in for {player.name} ({player.default_note})",
                reply_markup=markup,
            )
            return

        result = session.add_buy_in(player.id, amount)
        if result.event is None:
            text = "Buy-in ignored."
        else:
            text = f"{result.event.player_name} bought in {format_amount(result.event.amount, currency)}"
        reply(message.chat.id, result_lines(result, text, "Buy-in failed."))

    @bot.message_handler(commands=["note"])
    def handle_note(message):
        name, note = split_name_and_value(command_args(message.text))
        if note is None:
            bot.send_message(message.chat.id, "Usage: /note <name> <Cash|Transfer|Other>")
            return
        player = lookup(message, name)
        if player is None:
            return

        result = session.update_player(player.id, {"default_note": note})
        ok_text = f"Default note for {player.name}: {player.default_note}"
        reply(message.chat.id, result_lines(result, ok_text, "Could not update note."))

    @bot.message_handler(commands=["chips"])
    def handle_chips(message):
        name, chips = split_name_and_value(command_args(message.text))
        if chips is None:
            bot.send_message(message.chat.id, "Usage: /chips <name> <count>")
            return
        player = lookup(message, name)
        if player is None:
            return

        result = session.update_player(player.id, {"final_chips": chips})
        reply(message.chat.id, result_lines(result, f"Final chips for {player.name}: {chips}", "Could not update chips."))

    @bot.message_handler(commands=["summary", "list", "players"])
    def handle_summary(message):
        bot.send_message(message.chat.id, render_summary(session.settlement(), currency))

    @bot.message_handler(commands=["log"])
    def handle_log(message):
        bot.send_message(message.chat.id, render_log(session.log(), currency))

    @bot.message_handler(commands=["clear"])
    def handle_clear(message):
        bot.send_message(
            message.chat.id,
            "This will clear ALL players, logs, and inputs.",
            reply_markup=_yes_no_markup(
                encode_clear_confirmation(message.from_user.id, accepted=True),
                encode_clear_confirmation(message.from_user.id, accepted=False),
            ),
        )

    @bot.callback_query_handler(func=lambda call: call.data.startswith("buy:"))
    def handle_quick_buy_in(call):
        try:
            player_id, amount = parse_quick_buy_in(call.data)
        except ValueError:
            bot.answer_callback_query(call.id, "Invalid selection.")
            return

        result = session.add_buy_in(player_id, amount)
        if result.event is None:
            bot.answer_callback_query(call.id, "Player no longer at the table.")
            return

        text = f"{result.event.player_name} bought in {format_amount(result.event.amount, currency)}"
        bot.answer_callback_query(call.id, text)
        reply(call.message.chat.id, result_lines(result, text, "Buy-in failed."))

    @bot.callback_query_handler(func=lambda call: call.data.startswith("rm:"))
    def handle_remove_confirmation(call):
        try:
            accepted, player_id, requester_id = parse_remove_confirmation(call.data)
        except ValueError:
            bot.answer_callback_query(call.id, "Invalid confirmation.")
            return

        # Only the member who asked can confirm/decline.
        if call.from_user.id != requester_id:
            bot.answer_callback_query(call.id, NOT_REQUESTER_TEXT)
            return

        try:
            result = session.remove_player(player_id, confirmed=accepted)
            if accepted:
                name = result.player.name if result.player is not None else "Player"
                bot.answer_callback_query(call.id, f"Removed {name}.")
                reply(call.message.chat.id, result_lines(result, f"Removed {name}.", "Could not remove player."))
            else:
                bot.answer_callback_query(call.id, "Cancelled.")
        finally:
            bot.delete_message(call.message.chat.id, call.message.id)

    @bot.callback_query_handler(func=lambda call: call.data.startswith("clear:"))
    def handle_clear_confirmation(call):
        try:
            accepted, requester_id = parse_clear_confirmation(call.data)
        except ValueError:
            bot.answer_callback_query(call.id, "Invalid confirmation.")
            return

        if call.from_user.id != requester_id:
            bot.answer_callback_query(call.id, NOT_REQUESTER_TEXT)
            return

        try:
            result = session.clear_session(confirmed=accepted)
            if accepted:
                bot.answer_callback_query(call.id, "Session cleared.")
                reply(call.message.chat.id, result_lines(result, "Session cleared.", "Could not clear session."))
            else:
                bot.answer_callback_query(call.id, "Cancelled.")
        finally:
            bot.delete_message(call.message.chat.id, call.message.id)

    logger.info("Telegram handlers registered")
    return bot
