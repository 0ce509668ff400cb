import logging

from application.services import LedgerSession
from config import Config, configure_logging, create_store
from interfaces.telegram.handlers import create_telegram_bot

logger = logging.getLogger(__name__)


def main() -> None:
    config = Config()
    configure_logging(config.log_level)

    if not config.telegram_token:
        raise RuntimeError("TELEGRAM_TOKEN environment variable is not set.")

    session = LedgerSession.load(create_store(config))

    bot = create_telegram_bot(config.telegram_token, session, currency=config.currency)
    logger.info("Telegram bot polling")
    bot.infinity_polling()


if __name__ == "__main__":
    main()
