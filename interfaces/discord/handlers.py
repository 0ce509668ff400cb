from __future__ import annotations

import logging
from typing import Optional

import discord
from discord.ext import commands

from application.reports import (
    DEFAULT_CURRENCY,
    format_amount,
    render_log,
    render_summary,
)
from application.services import LedgerSession
from interfaces.commands import result_lines, split_name_and_amount, split_name_and_value
from interfaces.discord.pending import PendingConfirmation, PendingConfirmations

logger = logging.getLogger(__name__)

CONFIRM_EMOJI = "✅"
DECLINE_EMOJI = "❌"

HELP_TEXT = (
    "!add <name>                 - add a player\n"
    "!remove <name>              - remove a player and their buy-ins\n"
    "!buyin <name> <amount>      - record a buy-in\n"
    "!note <name> <Cash|Transfer|Other> - set the default note for new buy-ins\n"
    "!chips <name> <count>       - enter final chips at the end\n"
    "!summary                    - buy-ins, rounded chips and P/L\n"
    "!log                        - buy-in log, newest first\n"
    "!clear                      - clear ALL players and logs\n"
)


def create_discord_bot(
    session: LedgerSession,
    currency: str = DEFAULT_CURRENCY,
) -> commands.Bot:
    """
    Configure and return a Discord bot with behaviour analogous to
    the Telegram interface. Removal and clearing are confirmed with
    reactions by the member who asked for them.
    """

    intents = discord.Intents.default()
    intents.message_content = True
    intents.guilds = True
    intents.reactions = True

    # Disable the default help command so we can provide our own `!help`.
    bot = commands.Bot(command_prefix="!", intents=intents, help_command=None)

    # Pending confirmations keyed by the confirmation message ID.
    pending_confirmations = PendingConfirmations()

    async def ask_confirmation(
        ctx: commands.Context,
        text: str,
        action: str,
        player_id: Optional[str] = None,
    ) -> None:
        message = await ctx.send(
            f"{text}\nReact with {CONFIRM_EMOJI} to confirm or {DECLINE_EMOJI} to cancel."
        )
        await message.add_reaction(CONFIRM_EMOJI)
        await message.add_reaction(DECLINE_EMOJI)
        pending_confirmations.add(message.id, PendingConfirmation(action, player_id, ctx.author.id))

    async def lookup(ctx: commands.Context, name: str):
        if not name:
            await ctx.send("Please enter a player name.")
            return None
        player = session.find_player(name)
        if player is None:
            await ctx.send(f"No player named {name}.")
        return player

    @bot.event
    async def on_ready():
        logger.info("Discord bot logged in as %s (id=%s)", bot.user, bot.user.id)

    @bot.command(name="start")
    async def start_cmd(ctx: commands.Context):
        await ctx.send(
            "Welcome to the buy-in ledger (Discord)!\n"
            f"Banker-only - 1 chip = {currency}1 - round to nearest 10.\n"
            "Type !help to see available commands."
        )

    @bot.command(name="help")
    async def help_cmd(ctx: commands.Context):
        await ctx.send(HELP_TEXT)

    @bot.command(name="add")
    async def add_cmd(ctx: commands.Context, *, name: str = ""):
        result = session.add_player(name)
        await ctx.send("\n".join(result_lines(result, f"Added {name.strip()}.", "Could not add player.")))

    @bot.command(name="remove")
    async def remove_cmd(ctx: commands.Context, *, name: str = ""):
        player = await lookup(ctx, name.strip())
        if player is None:
            return
        await ask_confirmation(
            ctx,
            f"Remove {player.name}? Their buy-ins will be deleted too.",
            "remove",
            player.id,
        )

    @bot.command(name="buyin")
    async def buy_in_cmd(ctx: commands.Context, *, args: str = ""):
        name, amount = split_name_and_amount(args)
        if amount is None:
            await ctx.send("Usage: !buyin <name> <amount>")
            return
        player = await lookup(ctx, name)
        if player is None:
            return

        result = session.add_buy_in(player.id, amount)
        if result.event is None:
            text = "Buy-in ignored."
        else:
            text = f"{result.event.player_name} bought in {format_amount(result.event.amount, currency)}"
        await ctx.send("\n".join(result_lines(result, text, "Buy-in failed.")))

    @bot.command(name="note")
    async def note_cmd(ctx: commands.Context, *, args: str = ""):
        name, note = split_name_and_value(args)
        if note is None:
            await ctx.send("Usage: !note <name> <Cash|Transfer|Other>")
            return
        player = await lookup(ctx, name)
        if player is None:
            return

        result = session.update_player(player.id, {"default_note": note})
        ok_text = f"Default note for {player.name}: {player.default_note}"
        await ctx.send("\n".join(result_lines(result, ok_text, "Could not update note.")))

    @bot.command(name="chips")
    async def chips_cmd(ctx: commands.Context, *, args: str = ""):
        name, chips = split_name_and_value(args)
        if chips is None:
            await ctx.send("Usage: !chips <name> <count>")
            return
        player = await lookup(ctx, name)
        if player is None:
            return

        result = session.update_player(player.id, {"final_chips": chips})
        ok_text = f"Final chips for {player.name}: {chips}"
        await ctx.send("\n".join(result_lines(result, ok_text, "Could not update chips.")))

    @bot.command(name="summary", aliases=["list", "players"])
    async def summary_cmd(ctx: commands.Context):
        await ctx.send(render_summary(session.settlement(), currency))

    @bot.command(name="log")
    async def log_cmd(ctx: commands.Context):
        await ctx.send(render_log(session.log(), currency))

    @bot.command(name="clear")
    async def clear_cmd(ctx: commands.Context):
        await ask_confirmation(ctx, "This will clear ALL players, logs, and inputs.", "clear")

    @bot.event
    async def on_reaction_add(reaction: discord.Reaction, user: discord.abc.User):
        # Ignore bot reactions and reactions not on tracked messages.
        if user.bot:
            return

        message_id = reaction.message.id
        pending = pending_confirmations.get(message_id)
        if pending is None:
            return

        # Only the member who asked can confirm/decline.
        if user.id != pending.requester_id:
            return

        emoji = str(reaction.emoji)
        if emoji not in (CONFIRM_EMOJI, DECLINE_EMOJI):
            return
        confirmed = emoji == CONFIRM_EMOJI

        # Once reacted, remove the pending confirmation.
        pending_confirmations.pop(message_id)
        channel = reaction.message.channel

        if pending.action == "remove":
            result = session.remove_player(pending.player_id, confirmed=confirmed)
            name = result.player.name if result.player is not None else "Player"
            ok_text = f"Removed {name}."
        else:
            result = session.clear_session(confirmed=confirmed)
            ok_text = "Session cleared."

        if confirmed:
            await channel.send("\n".join(result_lines(result, ok_text, "Nothing changed.")))
        else:
            await channel.send("Cancelled.")

    return bot
