# digiwallet/handlers/callback_handler.py
from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler

class CallbackHandler(BaseHandler):
    """Routes inline keyboard presses to the command handlers"""

    def __init__(self, container, wallet_handler, split_handler, budget_handler):
        super().__init__(container)
        self.wallet_handler = wallet_handler
        self.split_handler = split_handler
        self.budget_handler = budget_handler

    async def handle_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        query = update.callback_query
        data = query.data
        # button presses carry no command arguments
        context.args = []

        if data == "main_menu":
            await query.answer()
            await query.edit_message_text("🏠 Main menu", reply_markup=self.keyboards.main_menu())
        elif data == "wallet_balance":
            await self.wallet_handler.balance(update, context)
        elif data == "wallet_history":
            await self.wallet_handler.history(update, context)
        elif data == "splits_list":
            await self.split_handler.splits(update, context)
        elif data.startswith("split_settle_"):
            await self.split_handler.settle_callback(update, context)
        elif data == "cashback_campaigns":
            await self.budget_handler.campaigns(update, context)
        elif data == "budgets_current":
            await self.budget_handler.budgets(update, context)
        else:
            await query.answer("⚠️ Unknown action")
