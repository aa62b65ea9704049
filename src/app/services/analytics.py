"""Spending analytics derived from a user's transaction ledger.

Everything here is a pure function of a transaction collection and an
explicit reference instant ``now``. Nothing reads the wall clock and nothing
mutates its input. Transactions only need ``amount`` (negative for expenses),
``txn_date``, ``category`` and ``title`` attributes.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Iterable, Protocol, Sequence

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
UNCATEGORIZED = "other"
SUBSCRIPTION = "subscription"

Number = Decimal | int | float


class LedgerEntry(Protocol):
    amount: Number
    txn_date: date
    category: str | None
    title: str


class BudgetLimit(Protocol):
    category: str
    amount_limit: Number


@dataclass(frozen=True)
class DailyTotal:
    date: date
    label: str
    amount: Number


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    icon: str
    earned: bool


@dataclass(frozen=True)
class Insight:
    icon: str
    title: str
    message: str


@dataclass(frozen=True)
class BudgetProgress:
    category: str
    amount_limit: Number
    spent: Number
    percent: float
    over_limit: bool


def _is_expense(txn: LedgerEntry) -> bool:
    return txn.amount < 0


def _today(now: datetime | date) -> date:
    return now.date() if isinstance(now, datetime) else now


# ===== Windows =====

def today_window(now: datetime) -> tuple[date, date]:
    today = _today(now)
    return today, today


def week_window(now: datetime) -> tuple[date, date]:
    """Trailing seven calendar days, today included."""
    today = _today(now)
    return today - timedelta(days=6), today


def month_window(now: datetime) -> tuple[date, date]:
    today = _today(now)
    return today.replace(day=1), today


def last_month_window(now: datetime) -> tuple[date, date]:
    """The whole previous calendar month."""
    end = _today(now).replace(day=1) - timedelta(days=1)
    return end.replace(day=1), end


# ===== Aggregates =====

def spending_in_window(transactions: Iterable[LedgerEntry], start: date, end: date) -> Number:
    """Total absolute expense amount dated within ``[start, end]``."""
    return sum(
        (abs(t.amount) for t in transactions if _is_expense(t) and start <= t.txn_date <= end),
        0,
    )


def percent_change(current: Number, previous: Number) -> Number:
    """Relative change in percent; 0 when there is no previous value."""
    if previous == 0:
        return 0
    return (current - previous) / previous * 100


def category_breakdown(transactions: Iterable[LedgerEntry]) -> dict[str, Number]:
    """Total expense per category. Income is ignored."""
    totals: dict[str, Number] = defaultdict(int)
    for txn in transactions:
        if _is_expense(txn):
            totals[txn.category or UNCATEGORIZED] += abs(txn.amount)
    return dict(totals)


def daily_trend(transactions: Sequence[LedgerEntry], now: datetime, days: int = 7) -> list[DailyTotal]:
    """One entry per day for the trailing ``days`` days, oldest first."""
    today = _today(now)
    trend = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        trend.append(
            DailyTotal(
                date=day,
                label=WEEKDAY_LABELS[day.weekday()],
                amount=spending_in_window(transactions, day, day),
            )
        )
    return trend


def biggest_expense(transactions: Iterable[LedgerEntry]) -> LedgerEntry | None:
    """The expense with the largest absolute amount.

    Ties go to the transaction encountered first in iteration order.
    """
    biggest = None
    for txn in transactions:
        if _is_expense(txn) and (biggest is None or abs(txn.amount) > abs(biggest.amount)):
            biggest = txn
    return biggest


def savings_streak(
    transactions: Sequence[LedgerEntry],
    now: datetime,
    threshold_per_day: Number = 50,
    lookback_days: int = 30,
) -> int:
    """Consecutive days, counting back from today, with spending under the threshold."""
    today = _today(now)
    streak = 0
    for offset in range(lookback_days):
        day = today - timedelta(days=offset)
        if spending_in_window(transactions, day, day) >= threshold_per_day:
            break
        streak += 1
    return streak


def achievements(
    transactions: Sequence[LedgerEntry],
    balance: Number,
    now: datetime,
    threshold_per_day: Number = 50,
) -> list[Achievement]:
    month_spending = spending_in_window(transactions, *month_window(now))
    streak = savings_streak(transactions, now, threshold_per_day)
    return [
        Achievement("budget_master", "Budget Master", "target", month_spending < 500),
        Achievement("saver", "Smart Saver", "piggy-bank", balance > 1000),
        Achievement("streak", "Streak Champ", "flame", streak >= 7),
        Achievement("first", "First Steps", "footprints", len(transactions) > 0),
    ]


def budget_progress(budgets: Iterable[BudgetLimit], breakdown: dict[str, Number]) -> list[BudgetProgress]:
    """Spending against each budget goal; ``percent`` is capped at 100."""
    progress = []
    for budget in budgets:
        spent = breakdown.get(budget.category, 0)
        ratio = float(spent) / float(budget.amount_limit) * 100 if budget.amount_limit else 0.0
        progress.append(
            BudgetProgress(
                category=budget.category,
                amount_limit=budget.amount_limit,
                spent=spent,
                percent=min(100.0, ratio),
                over_limit=spent > budget.amount_limit,
            )
        )
    return progress


def insights(
    transactions: Sequence[LedgerEntry],
    now: datetime,
    high_daily_average: Number = 100,
    subscription_tip_over: Number = 50,
) -> list[Insight]:
    """Short observations about this month's and this week's spending.

    Always includes a pace note (high spending or on track, from the trailing
    week's daily average). A top category note is added when the month has
    expenses, and a savings tip when this month's subscription charges exceed
    ``subscription_tip_over``.
    """
    start, end = month_window(now)
    this_month = [t for t in transactions if start <= t.txn_date <= end]
    notes = []

    breakdown = category_breakdown(this_month)
    if breakdown:
        top = max(breakdown, key=breakdown.get)
        notes.append(
            Insight("trending-up", "Top Category", f"{top.capitalize()}: ${breakdown[top]:.2f} this month")
        )

    daily_average = spending_in_window(transactions, *week_window(now)) / 7
    if daily_average > high_daily_average:
        notes.append(Insight("alert-circle", "High Spending", f"Averaging ${daily_average:.0f}/day this week"))
    else:
        notes.append(
            Insight("check-circle", "On Track", f"Averaging ${daily_average:.0f}/day - looking good!")
        )

    subscriptions = sum((abs(t.amount) for t in this_month if t.category == SUBSCRIPTION), 0)
    if subscriptions > subscription_tip_over:
        notes.append(
            Insight(
                "lightbulb",
                "Savings Tip",
                f"${subscriptions:.0f} in subscriptions. Review unused services!",
            )
        )
    return notes


def summarize(
    transactions: Sequence[LedgerEntry],
    now: datetime,
    balance: Number = 0,
    budgets: Iterable[BudgetLimit] = (),
    threshold_per_day: Number = 50,
) -> dict[str, Any]:
    """Full dashboard payload for one user."""
    month = spending_in_window(transactions, *month_window(now))
    last_month = spending_in_window(transactions, *last_month_window(now))
    breakdown = category_breakdown(transactions)
    return {
        "today_spending": spending_in_window(transactions, *today_window(now)),
        "week_spending": spending_in_window(transactions, *week_window(now)),
        "month_spending": month,
        "last_month_spending": last_month,
        "month_change": round(float(percent_change(month, last_month)), 1),
        "categories": breakdown,
        "daily_trend": daily_trend(transactions, now),
        "biggest_expense": biggest_expense(transactions),
        "total_transactions": len(transactions),
        "savings_streak": savings_streak(transactions, now, threshold_per_day),
        "achievements": achievements(transactions, balance, now, threshold_per_day),
        "budgets": budget_progress(budgets, breakdown),
        "insights": insights(transactions, now),
    }
