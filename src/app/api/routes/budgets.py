"""Budget goal endpoints."""

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_ledger_service
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.ledger import BudgetGoalResponse, BudgetGoalSet
from app.services.ledger import LedgerService

router = APIRouter(prefix="/budgets", tags=["budgets"])


@router.get("", response_model=list[BudgetGoalResponse], summary="List budget goals")
async def list_budgets(
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> list[BudgetGoalResponse]:
    budgets = await ledger.list_budgets(current_user.id)
    return [BudgetGoalResponse.model_validate(budget) for budget in budgets]


@router.post(
    "",
    response_model=MessageResponse,
    summary="Set budget goal",
    description="Create the goal for a category, or replace the limit of the existing one.",
)
async def set_budget(
    data: BudgetGoalSet,
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> MessageResponse:
    await ledger.set_budget(current_user.id, data.category, data.amount_limit, data.period)
    return MessageResponse(message="Budget goal set")
