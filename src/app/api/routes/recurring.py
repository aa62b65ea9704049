"""Recurring charge endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_ledger_service
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.ledger import RecurringCreate, RecurringCreated, RecurringResponse
from app.services.ledger import LedgerService

router = APIRouter(prefix="/recurring", tags=["recurring"])


@router.get("", response_model=list[RecurringResponse], summary="List recurring charges")
async def list_recurring(
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> list[RecurringResponse]:
    charges = await ledger.list_recurring(current_user.id)
    return [RecurringResponse.model_validate(charge) for charge in charges]


@router.post("", response_model=RecurringCreated, summary="Add recurring charge")
async def add_recurring(
    data: RecurringCreate,
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> RecurringCreated:
    charge = await ledger.add_recurring(current_user.id, **data.model_dump())
    return RecurringCreated(message="Recurring transaction added", id=charge.id)


@router.delete("/{recurring_id}", response_model=MessageResponse, summary="Delete recurring charge")
async def delete_recurring(
    recurring_id: UUID,
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> MessageResponse:
    """
    Raises:
        404: Recurring charge not found or belongs to another user
    """
    await ledger.delete_recurring(current_user.id, recurring_id)
    return MessageResponse(message="Recurring transaction deleted")
