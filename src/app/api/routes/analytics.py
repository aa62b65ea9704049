"""Spending analytics endpoint."""

from fastapi import APIRouter, Depends

from app.api.deps import get_clock, get_current_user, get_ledger_service, get_settings
from app.config import Settings
from app.core.store import Clock
from app.models.user import User
from app.schemas.analytics import AnalyticsResponse, BiggestExpenseResponse
from app.services.analytics import summarize
from app.services.ledger import LedgerService

router = APIRouter(tags=["analytics"])


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    summary="Spending dashboard",
    description="""
    Spending totals for today, the trailing week and the current and previous
    month, category breakdown, seven-day trend, savings streak, achievements
    and progress against budget goals.
    """,
)
async def get_analytics(
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
    settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
) -> AnalyticsResponse:
    transactions = await ledger.list_transactions(current_user.id)
    card = await ledger.primary_card(current_user.id)
    budgets = await ledger.list_budgets(current_user.id)

    summary = summarize(
        transactions,
        clock(),
        balance=card.balance if card else 0,
        budgets=budgets,
        threshold_per_day=settings.savings_streak_threshold,
    )

    biggest = summary["biggest_expense"]
    summary["biggest_expense"] = (
        BiggestExpenseResponse(title=biggest.title, amount=abs(biggest.amount), date=biggest.txn_date)
        if biggest is not None
        else None
    )
    return AnalyticsResponse.model_validate(summary)
