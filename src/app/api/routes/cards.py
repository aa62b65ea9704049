"""Card management endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_ledger_service
from app.models.user import User
from app.schemas.card import (
    CardCreate,
    CardCreated,
    CardResponse,
    CardUpdate,
    DefaultCardRequest,
)
from app.schemas.common import MessageResponse
from app.services.ledger import LedgerService

router = APIRouter(tags=["cards"])

# Returned by GET /card until the user adds a card.
PLACEHOLDER_CARD = CardResponse(holder_name="New User", last_four="0000")


@router.get(
    "/card",
    response_model=CardResponse,
    summary="Get primary card",
    description="The default card, or the first card when none is flagged as default.",
)
async def get_primary_card(
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> CardResponse:
    card = await ledger.primary_card(current_user.id)
    if card is None:
        return PLACEHOLDER_CARD
    return CardResponse.model_validate(card)


@router.get(
    "/cards",
    response_model=list[CardResponse],
    summary="List user's cards",
)
async def list_cards(
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> list[CardResponse]:
    """
    List all cards for the authenticated user, default card first.
    """
    cards = await ledger.list_cards(current_user.id)
    return [CardResponse.model_validate(card) for card in cards]


@router.post(
    "/cards",
    response_model=CardCreated,
    summary="Add card",
    description="Add a card. The first card a user adds becomes the default.",
)
async def add_card(
    data: CardCreate,
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> CardCreated:
    card = await ledger.add_card(current_user.id, **data.model_dump())
    return CardCreated(message="Card added", id=card.id)


@router.post(
    "/card",
    response_model=MessageResponse,
    summary="Update card",
)
async def update_card(
    data: CardUpdate,
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> MessageResponse:
    """
    Update the editable fields of one of the user's cards.

    Raises:
        404: Card not found or belongs to another user
    """
    await ledger.update_card(current_user.id, data.id, **data.model_dump(exclude={"id"}))
    return MessageResponse(message="Card updated")


@router.delete(
    "/cards/{card_id}",
    response_model=MessageResponse,
    summary="Delete card",
    description="Delete a card together with its transactions and payments.",
)
async def delete_card(
    card_id: UUID,
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> MessageResponse:
    await ledger.delete_card(current_user.id, card_id)
    return MessageResponse(message="Card deleted")


@router.post(
    "/cards/default",
    response_model=MessageResponse,
    summary="Set default card",
)
async def set_default_card(
    data: DefaultCardRequest,
    current_user: User = Depends(get_current_user),
    ledger: LedgerService = Depends(get_ledger_service),
) -> MessageResponse:
    await ledger.set_default_card(current_user.id, data.card_id)
    return MessageResponse(message="Default card updated")
