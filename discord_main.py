from application.services import LedgerSession
from config import Config, configure_logging, create_store
from interfaces.discord.handlers import create_discord_bot


def main() -> None:
    config = Config()
    configure_logging(config.log_level)

    if not config.discord_token:
        raise RuntimeError("DISCORD_TOKEN environment variable is not set.")

    session = LedgerSession.load(create_store(config))

    bot = create_discord_bot(session, currency=config.currency)
    bot.run(config.discord_token, log_handler=None)


if __name__ == "__main__":
    main()
