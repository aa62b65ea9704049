"""Transaction endpoints."""

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_ledger_service
from app.models.user import User
from app.schemas.transaction import TransactionCreate, TransactionCreated, TransactionResponse
from app.services.ledger import LedgerService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get(
    "",
    response_model=list[TransactionResponse],
    summary="List transactions",
    description="All of the user's transactions, newest first.",
)
async def list_transactions(
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> list[TransactionResponse]:
    transactions = await ledger.list_transactions(current_user.id)
    return [TransactionResponse.model_validate(txn) for txn in transactions]


@router.post(
    "",
    response_model=TransactionCreated,
    summary="Add transaction",
)
async def add_transaction(
    data: TransactionCreate,
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> TransactionCreated:
    """
    Record a transaction. With a cardId the amount is posted to that card's balance.

    Raises:
        404: Card not found or belongs to another user
    """
    txn = await ledger.add_transaction(current_user.id, **data.model_dump())
    return TransactionCreated(message="Transaction added", transaction=TransactionResponse.model_validate(txn))
