# digiwallet/handlers/budget_handler.py
from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler

class BudgetHandler(BaseHandler):
    """Cashback campaigns and budget status"""

    async def campaigns(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        result = await self.container.cashback_service.get_active_campaigns()
        await self.reply(update, self.messages.format_campaigns(result["data"]["campaigns"]),
                         reply_markup=self.keyboards.back_to_menu())

    async def budgets(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/budgets [YYYY-MM]"""
        user_id = await self.require_user(update, context)
        if not user_id:
            return

        service = self.container.budget_service
        month = context.args[0] if context.args else service.current_month()
        result = await service.get_user_budgets(user_id, month)
        if not result["success"]:
            await self.reply(update, f"❌ {result['message']}")
            return
        await self.reply(update, self.messages.format_budgets(result["data"]),
                         reply_markup=self.keyboards.back_to_menu())
