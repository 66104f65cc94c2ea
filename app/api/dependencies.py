from typing import AsyncGenerator
from fastapi import Depends, Request
import structlog

from app.core.config import Settings
from app.db.store import TransactionStore
from app.db.supabase_store import SupabaseTransactionStore
from app.transactions.service import TransactionService


logger = structlog.get_logger("dependencies")


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with"""
    return request.app.state.settings


async def get_transaction_store(
    request: Request,
    settings: Settings = Depends(get_app_settings)
) -> AsyncGenerator[TransactionStore, None]:
    """Storage handle for the current request, closed once the request is done"""
    
    authorization = None
    if settings.FORWARD_AUTH_HEADER:
        authorization = request.headers.get("authorization")
        if authorization is None:
            logger.debug("No Authorization header to forward to storage")
    
    store = SupabaseTransactionStore(settings, authorization=authorization)
    try:
        yield store
    finally:
        await store.aclose()


def get_transaction_service(
    store: TransactionStore = Depends(get_transaction_store)
) -> TransactionService:
    return TransactionService(store)
