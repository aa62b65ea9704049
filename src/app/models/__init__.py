"""Database models."""
from app.models.user import User
from app.models.card import Card
from app.models.transaction import Transaction
from app.models.payment import Payment
from app.models.recurring_charge import RecurringCharge
from app.models.budget_goal import BudgetGoal
from app.models.remember_token import RememberToken
from app.models.kv_entry import KeyValueEntry

__all__ = [
    "User",
    "Card",
    "Transaction",
    "Payment",
    "RecurringCharge",
    "BudgetGoal",
    "RememberToken",
    "KeyValueEntry",
]
