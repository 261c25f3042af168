from fastapi import APIRouter

from fintrack.api.routes import analytics, transactions

api_router = APIRouter()

api_router.include_router(transactions.router)
api_router.include_router(analytics.router)
