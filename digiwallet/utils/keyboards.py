# digiwallet/utils/keyboards.py
from typing import Any, Dict, List
from telegram import InlineKeyboardButton, InlineKeyboardMarkup

class Keyboards:
    @staticmethod
    def main_menu() -> InlineKeyboardMarkup:
        keyboard = [
            [InlineKeyboardButton("💰 Balance", callback_data="wallet_balance"),
             InlineKeyboardButton("📜 History", callback_data="wallet_history")],
            [InlineKeyboardButton("🧾 Bill splits", callback_data="splits_list"),
             InlineKeyboardButton("🎁 Campaigns", callback_data="cashback_campaigns")],
            [InlineKeyboardButton("📊 Budgets", callback_data="budgets_current")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def pending_debts(splits: List[Dict[str, Any]]) -> InlineKeyboardMarkup:
        """One settle button per split the user still owes"""
        keyboard = [
            [InlineKeyboardButton(
                f"✅ Pay {split['share_amount']:.2f} to {split.get('payer_name') or split['payer_user_id']}",
                callback_data=f"split_settle_{split['split_id']}"
            )]
            for split in splits
        ]
        keyboard.append([InlineKeyboardButton("🏠 Main menu", callback_data="main_menu")])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def back_to_menu() -> InlineKeyboardMarkup:
        return InlineKeyboardMarkup([[InlineKeyboardButton("🏠 Main menu", callback_data="main_menu")]])
