"""Card and ledger operations: postings, payments, transfers, budgets."""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InternalError, NotFound, ValidationError
from app.core.store import Clock, utcnow
from app.models.budget_goal import BudgetGoal
from app.models.card import Card
from app.models.payment import Payment
from app.models.recurring_charge import RecurringCharge
from app.models.transaction import Transaction
from app.repositories.budget_goal import BudgetGoalRepository
from app.repositories.card import CardRepository
from app.repositories.payment import PaymentRepository
from app.repositories.recurring_charge import RecurringChargeRepository
from app.repositories.transaction import TransactionRepository

logger = logging.getLogger(__name__)

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _base36(number: int) -> str:
    digits = ""
    while True:
        number, remainder = divmod(number, 36)
        digits = _BASE36[remainder] + digits
        if number == 0:
            return digits


@dataclass
class TransferResult:
    reference: str
    amount: Decimal
    recipient: str
    new_balance: Decimal


class LedgerService:
    """Service layer for a user's cards and ledger."""

    def __init__(self, db: AsyncSession, clock: Clock = utcnow):
        """Initialize ledger service with database session.

        Args:
            db: Database session
            clock: Source of the current time (transfer dates, references)
        """
        self.db = db
        self.clock = clock
        self.cards = CardRepository(db)
        self.transactions = TransactionRepository(db)
        self.payments = PaymentRepository(db)
        self.recurring = RecurringChargeRepository(db)
        self.budgets = BudgetGoalRepository(db)

    def _reference(self, prefix: str) -> str:
        return f"{prefix}-{_base36(int(self.clock().timestamp() * 1000))}"

    async def _owned_card(self, user_id: UUID, card_id: UUID) -> Card:
        card = await self.cards.get_owned(user_id, card_id)
        if card is None:
            raise NotFound("Card not found")
        return card

    # ===== Cards =====

    async def list_cards(self, user_id: UUID) -> list[Card]:
        return await self.cards.get_all_by_user(user_id)

    async def primary_card(self, user_id: UUID) -> Card | None:
        """The default card, or the first card when none is flagged."""
        cards = await self.cards.get_all_by_user(user_id)
        return cards[0] if cards else None

    async def add_card(self, user_id: UUID, **fields) -> Card:
        """Add a card. A user's first card becomes the default."""
        is_first = await self.cards.count_by_user(user_id) == 0
        card = await self.cards.create(Card(user_id=user_id, is_default=is_first, **fields))
        logger.info("Card added", extra={"user_id": str(user_id), "card_id": str(card.id)})
        return card

    async def update_card(self, user_id: UUID, card_id: UUID, **fields) -> Card:
        await self._owned_card(user_id, card_id)
        return await self.cards.update(card_id, fields)

    async def delete_card(self, user_id: UUID, card_id: UUID) -> None:
        """Delete a card together with its transactions and payments."""
        card = await self._owned_card(user_id, card_id)
        await self.db.delete(card)
        await self.db.commit()
        logger.info("Card deleted", extra={"user_id": str(user_id), "card_id": str(card_id)})

    async def set_default_card(self, user_id: UUID, card_id: UUID) -> None:
        await self._owned_card(user_id, card_id)
        await self.cards.set_default(user_id, card_id)

    # ===== Transactions =====

    async def list_transactions(self, user_id: UUID) -> list[Transaction]:
        return await self.transactions.get_by_user(user_id)

    async def add_transaction(
        self,
        user_id: UUID,
        title: str,
        txn_date: date,
        amount: Decimal,
        category: str,
        icon: str,
        card_id: UUID | None = None,
    ) -> Transaction:
        """Record a transaction and post its amount to the card balance.

        The insert and the balance change commit together.
        """
        if card_id is not None:
            await self._owned_card(user_id, card_id)

        txn = Transaction(
            user_id=user_id,
            card_id=card_id,
            title=title,
            txn_date=txn_date,
            amount=amount,
            category=category,
            icon=icon,
        )
        self.db.add(txn)
        if card_id is not None:
            await self.cards.adjust_balance(user_id, card_id, amount)
        await self.db.commit()
        await self.db.refresh(txn)
        return txn

    # ===== Payments and transfers =====

    async def list_payments(self, user_id: UUID) -> list[Payment]:
        return await self.payments.get_by_user(user_id)

    async def add_payment(
        self,
        user_id: UUID,
        amount: Decimal,
        recipient: str,
        payment_date: date,
        status: str,
        card_id: UUID | None = None,
    ) -> Payment:
        if card_id is not None:
            await self._owned_card(user_id, card_id)
        return await self.payments.create(
            Payment(
                user_id=user_id,
                card_id=card_id,
                amount=amount,
                recipient=recipient,
                payment_date=payment_date,
                status=status,
                reference=self._reference("PAY"),
            )
        )

    async def transfer(
        self,
        user_id: UUID,
        card_id: UUID,
        amount: Decimal,
        recipient_name: str,
        note: str = "",
    ) -> TransferResult:
        """Send money from a card balance.

        The debit, the completed payment record and the expense transaction
        are written in one database transaction: either all three land or
        none do.

        Raises:
            NotFound: If the card is not the user's
            ValidationError: If the balance does not cover the amount
            InternalError: If the ledger writes fail
        """
        card = await self._owned_card(user_id, card_id)
        if card.balance < amount:
            raise ValidationError("Insufficient balance")

        reference = self._reference("TRF")
        today = self.clock().date()
        title = f"Transfer to {recipient_name}" + (f" - {note}" if note else "")

        try:
            if not await self.cards.debit_if_covered(user_id, card_id, amount):
                await self.db.rollback()
                raise ValidationError("Insufficient balance")
            self.db.add(
                Payment(
                    user_id=user_id,
                    card_id=card_id,
                    amount=amount,
                    recipient=recipient_name,
                    payment_date=today,
                    status="completed",
                    reference=reference,
                )
            )
            self.db.add(
                Transaction(
                    user_id=user_id,
                    card_id=card_id,
                    title=title[:200],
                    txn_date=today,
                    amount=-amount,
                    category="transfer",
                    icon="send",
                )
            )
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(
                "Transfer failed; ledger left unchanged",
                extra={"user_id": str(user_id), "card_id": str(card_id), "error_type": type(exc).__name__},
            )
            raise InternalError("Transfer failed") from exc

        await self.db.refresh(card)
        logger.info("Transfer completed", extra={"user_id": str(user_id), "reference": reference})
        return TransferResult(
            reference=reference,
            amount=amount,
            recipient=recipient_name,
            new_balance=card.balance,
        )

    # ===== Recurring charges =====

    async def list_recurring(self, user_id: UUID) -> list[RecurringCharge]:
        return await self.recurring.get_by_user(user_id)

    async def add_recurring(self, user_id: UUID, **fields) -> RecurringCharge:
        return await self.recurring.create(RecurringCharge(user_id=user_id, **fields))

    async def delete_recurring(self, user_id: UUID, recurring_id: UUID) -> None:
        if await self.recurring.get_owned(user_id, recurring_id) is None:
            raise NotFound("Recurring transaction not found")
        await self.recurring.delete(recurring_id)

    # ===== Budgets =====

    async def list_budgets(self, user_id: UUID) -> list[BudgetGoal]:
        return await self.budgets.get_by_user(user_id)

    async def set_budget(self, user_id: UUID, category: str, amount_limit: Decimal, period: str) -> BudgetGoal:
        return await self.budgets.upsert(user_id, category, amount_limit, period)
