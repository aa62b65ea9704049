"""Response schemas for the analytics dashboard."""

import datetime as dt

from app.schemas.common import ApiModel


class DailyTotalResponse(ApiModel):
    date: dt.date
    label: str
    amount: float


class BiggestExpenseResponse(ApiModel):
    title: str
    amount: float
    date: dt.date


class AchievementResponse(ApiModel):
    id: str
    name: str
    icon: str
    earned: bool


class BudgetProgressResponse(ApiModel):
    category: str
    amount_limit: float
    spent: float
    percent: float
    over_limit: bool


class InsightResponse(ApiModel):
    icon: str
    title: str
    message: str


class AnalyticsResponse(ApiModel):
    today_spending: float
    week_spending: float
    month_spending: float
    last_month_spending: float
    month_change: float
    categories: dict[str, float]
    daily_trend: list[DailyTotalResponse]
    biggest_expense: BiggestExpenseResponse | None
    total_transactions: int
    savings_streak: int
    achievements: list[AchievementResponse]
    budgets: list[BudgetProgressResponse]
    insights: list[InsightResponse]
