# main.py
import asyncio
import logging
from aiohttp import web
from digiwallet.api import create_app
from digiwallet.bot import WalletBot
from digiwallet.config import Config, setup_logging
from digiwallet.container import Container
from digiwallet.database.database import Database

async def main():
    # Setup logging
    setup_logging()
    logger = logging.getLogger(__name__)

    Config.validate()

    db = Database()
    await db.connect()
    container = Container(db)

    runner = web.AppRunner(create_app(container))
    bot = None
    try:
        await runner.setup()
        site = web.TCPSite(runner, Config.HOST, Config.PORT)
        await site.start()
        logger.info(f"HTTP API listening on {Config.HOST}:{Config.PORT}")

        if Config.TELEGRAM_TOKEN:
            bot = WalletBot(container)
            await bot.start()

        await asyncio.Event().wait()
    except Exception as e:
        logger.error(f"Error running wallet service: {e}", exc_info=True)
        raise
    finally:
        if bot:
            await bot.stop()
        await runner.cleanup()
        await db.close()

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
