"""API routes."""

from fastapi import APIRouter

from app.api.routes import analytics, auth, budgets, cards, payments, recurring, transactions

router = APIRouter(prefix="/api")

# Include routers
router.include_router(auth.router)
router.include_router(cards.router)
router.include_router(transactions.router)
router.include_router(payments.router)
router.include_router(analytics.router)
router.include_router(recurring.router)
router.include_router(budgets.router)
