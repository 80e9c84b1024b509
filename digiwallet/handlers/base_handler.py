# digiwallet/handlers/base_handler.py
from typing import Optional
from telegram import Update
from telegram.ext import ContextTypes
from ..utils.keyboards import Keyboards
from ..utils.messages import Messages

class BaseHandler:
    """Shared plumbing for the chat handlers.

    A chat is bound to a wallet user through a session id kept in
    ``context.chat_data``; the session itself lives in the shared SessionStore.
    """
    def __init__(self, container):
        self.container = container
        self.keyboards = Keyboards()
        self.messages = Messages()

    def current_user(self, context: ContextTypes.DEFAULT_TYPE) -> Optional[str]:
        session_id = context.chat_data.get("session_id")
        if not session_id:
            return None
        session = self.container.sessions.get(session_id)
        if not session:
            context.chat_data.pop("session_id", None)
            return None
        return session.user_id

    async def require_user(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> Optional[str]:
        user_id = self.current_user(context)
        if not user_id:
            await self.reply(update, "🔒 Please log in first: /login <user_id>")
        return user_id

    @staticmethod
    async def reply(update: Update, text: str, reply_markup=None):
        """Answer a command, or edit the message behind a button press"""
        if update.callback_query:
            await update.callback_query.answer()
            await update.callback_query.edit_message_text(text, reply_markup=reply_markup)
        else:
            await update.message.reply_text(text, reply_markup=reply_markup)
