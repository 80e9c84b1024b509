# digiwallet/bot.py
import logging
from telegram.ext import Application, CommandHandler, CallbackQueryHandler
from .config import Config
from .handlers import WalletHandler, SplitHandler, BudgetHandler, CallbackHandler

logger = logging.getLogger(__name__)

class WalletBot:
    def __init__(self, container, token: str = None):
        """Chat front-end over the wallet services"""
        self.application = Application.builder().token(token or Config.TELEGRAM_TOKEN).build()
        self.wallet_handler = WalletHandler(container)
        self.split_handler = SplitHandler(container)
        self.budget_handler = BudgetHandler(container)
        self.callback_handler = CallbackHandler(
            container, self.wallet_handler, self.split_handler, self.budget_handler
        )
        self.setup_handlers()

    def setup_handlers(self):
        commands = {
            "start": self.wallet_handler.start,
            "login": self.wallet_handler.login,
            "logout": self.wallet_handler.logout,
            "balance": self.wallet_handler.balance,
            "history": self.wallet_handler.history,
            "topup": self.wallet_handler.topup,
            "pay": self.wallet_handler.pay,
            "transfer": self.wallet_handler.transfer,
            "qr": self.wallet_handler.qr,
            "splits": self.split_handler.splits,
            "settle": self.split_handler.settle,
            "campaigns": self.budget_handler.campaigns,
            "budgets": self.budget_handler.budgets,
        }
        for name, callback in commands.items():
            self.application.add_handler(CommandHandler(name, callback))

        self.application.add_handler(CallbackQueryHandler(self.callback_handler.handle_callback))

    async def start(self):
        """Begin polling inside an already running event loop"""
        await self.application.initialize()
        await self.application.start()
        await self.application.updater.start_polling()
        logger.info("Telegram bot started")

    async def stop(self):
        await self.application.updater.stop()
        await self.application.stop()
        await self.application.shutdown()
        logger.info("Telegram bot stopped")
