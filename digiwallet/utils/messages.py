# digiwallet/utils/messages.py
from typing import Dict, Any, List
from ..utils.formatters import format_money, format_datetime

STATUS_EMOJI = {
    "good": "🟢",
    "warning": "🟡",
    "danger": "🔴"
}

class Messages:
    @staticmethod
    def welcome(name: str) -> str:
        return (
            f"Hello {name}! 👋\n\n"
            "Log in with /login <user_id> to use your wallet.\n"
            "Commands: /balance /history /topup /pay /transfer /qr "
            "/splits /settle /campaigns /budgets"
        )

    @staticmethod
    def format_balance(data: Dict[str, Any]) -> str:
        return f"👛 Your balance:\n💰 {format_money(data['balance'], data['currency'])}"

    @staticmethod
    def format_history(data: Dict[str, Any]) -> str:
        transactions = data["transactions"]
        if not transactions:
            return "You have no transactions yet."

        lines = ["📜 Recent transactions:\n"]
        for tx in transactions:
            lines.append(
                f"{format_datetime(tx['created_at'])}  {tx['description']}\n"
                f"    {tx['formatted_amount']} ({tx['type']})"
            )
        pagination = data["pagination"]
        lines.append(f"\nPage {pagination['page']} of {max(pagination['total_pages'], 1)}")
        return "\n".join(lines)

    @staticmethod
    def format_payment(data: Dict[str, Any]) -> str:
        text = (
            f"✅ Paid {format_money(data['amount'])} to {data['merchant_name']}\n"
            f"🧾 {data['transaction_id']}\n"
            f"💰 New balance: {format_money(data['new_balance'])}"
        )
        cashback = data.get("cashback")
        if cashback and cashback["applied"]:
            text += f"\n🎁 {cashback['message']}"
        return text

    @staticmethod
    def format_split(split: Dict[str, Any], user_id: str) -> str:
        if split["payer_user_id"] == user_id:
            who = f"{split.get('debtor_name') or split['debtor_user_id']} owes you"
        else:
            who = f"You owe {split.get('payer_name') or split['payer_user_id']}"
        return (
            f"#{split['split_id']} {who} {format_money(split['share_amount'])} "
            f"[{split['status']}]"
        )

    @staticmethod
    def format_split_summary(data: Dict[str, Any], splits: List[Dict[str, Any]], user_id: str) -> str:
        summary = data["summary"]
        lines = [
            "🧾 Bill splits",
            f"Owed to you: {format_money(summary['owed_to_me']['total_amount'])} "
            f"({summary['owed_to_me']['count']})",
            f"You owe: {format_money(summary['i_owe']['total_amount'])} "
            f"({summary['i_owe']['count']})"
        ]
        if splits:
            lines.append("")
            lines.extend(Messages.format_split(s, user_id) for s in splits)
        return "\n".join(lines)

    @staticmethod
    def format_campaigns(campaigns: List[Dict[str, Any]]) -> str:
        if not campaigns:
            return "There are no running cashback campaigns."
        return "🎁 Cashback campaigns:\n" + "\n".join(f"• {c['description']}" for c in campaigns)

    @staticmethod
    def format_budgets(data: Dict[str, Any]) -> str:
        budgets = data["budgets"]
        if not budgets:
            return f"No budgets set for {data['month']}."

        lines = [f"📊 Budgets for {data['month']}:"]
        for b in budgets:
            lines.append(
                f"{STATUS_EMOJI[b['status']]} {b['category']}: "
                f"{format_money(b['spent_amount'])} / {format_money(b['limit_amount'])} "
                f"({b['percentage']}%)"
            )
        return "\n".join(lines)
