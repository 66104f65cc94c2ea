from fastapi import APIRouter
from app.api.v1.endpoints import transactions

# Create API router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
