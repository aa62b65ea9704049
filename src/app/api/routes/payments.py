"""Payment and money transfer endpoints."""

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_ledger_service
from app.models.user import User
from app.schemas.ledger import (
    PaymentCreate,
    PaymentCreated,
    PaymentResponse,
    TransferRequest,
    TransferResponse,
)
from app.services.ledger import LedgerService

router = APIRouter(tags=["payments"])


@router.get(
    "/payments",
    response_model=list[PaymentResponse],
    summary="List payments",
)
async def list_payments(
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> list[PaymentResponse]:
    payments = await ledger.list_payments(current_user.id)
    return [PaymentResponse.model_validate(payment) for payment in payments]


@router.post(
    "/payments",
    response_model=PaymentCreated,
    summary="Record payment",
)
async def add_payment(
    data: PaymentCreate,
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> PaymentCreated:
    payment = await ledger.add_payment(current_user.id, **data.model_dump())
    return PaymentCreated(message="Payment recorded", id=payment.id, reference=payment.reference)


@router.post(
    "/transfer",
    response_model=TransferResponse,
    summary="Send money",
    description="""
    Transfer money from one of the user's cards.

    The card is debited and a completed payment plus a matching expense
    transaction are recorded atomically.
    """,
)
async def transfer(
    data: TransferRequest,
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> TransferResponse:
    """
    Raises:
        400: Invalid amount or insufficient balance
        404: Card not found or belongs to another user
        500: Ledger writes failed (nothing is applied)
    """
    result = await ledger.transfer(
        current_user.id,
        data.card_id,
        data.amount,
        data.recipient_name,
        note=data.note,
    )
    return TransferResponse(
        message="Transfer successful",
        reference=result.reference,
        amount=result.amount,
        recipient=result.recipient,
        new_balance=result.new_balance,
    )
