from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
import structlog

from app.api.dependencies import get_transaction_service
from app.api.v1.schemas.common import BaseResponse, ErrorResponse
from app.api.v1.schemas.transactions import (
    EnrichedTransaction,
    StoredTransaction,
    Transaction,
    TransactionEchoResponse,
)
from app.db.store import StorageError
from app.transactions.service import BODY_METHODS, TransactionService


router = APIRouter()
logger = structlog.get_logger("transactions_api")

ERROR_RESPONSES = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}

# Method/id combinations outside the documented surface; they list transactions
UNDOCUMENTED_ID_METHODS = ["POST", "PATCH"]
UNDOCUMENTED_COLLECTION_METHODS = ["PUT", "DELETE", "PATCH"]


async def dispatch(
    request: Request,
    service: TransactionService,
    transaction_id: Optional[str] = None
) -> JSONResponse:
    """Parse the body if needed, run the resolved operation and shape the response"""
    
    try:
        transaction = None
        if request.method in BODY_METHODS:
            transaction = await request.json()
        
        payload = await service.handle(request.method, transaction_id, transaction)
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)
        
    except Exception as e:
        message = (e.message if isinstance(e, StorageError) else str(e)) or type(e).__name__
        logger.error(
            "Transaction request failed",
            transaction_id=transaction_id,
            error=message,
            exc_info=True,
        )
        return JSONResponse(
            content=ErrorResponse(error=message).model_dump(),
            status_code=status.HTTP_400_BAD_REQUEST,
        )


@router.get("", response_model=List[EnrichedTransaction], responses=ERROR_RESPONSES)
async def list_transactions(
    request: Request,
    service: TransactionService = Depends(get_transaction_service)
) -> Any:
    """List all transactions with account, customer, segment, supplier and creator embedded"""
    return await dispatch(request, service)


@router.post(
    "",
    response_model=BaseResponse,
    responses=ERROR_RESPONSES,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": Transaction.model_json_schema()}},
        }
    },
)
async def create_transaction(
    request: Request,
    service: TransactionService = Depends(get_transaction_service)
) -> Any:
    """Create a transaction; the id is assigned by storage"""
    return await dispatch(request, service)


@router.get(
    "/{transaction_id}",
    response_model=List[StoredTransaction],
    responses=ERROR_RESPONSES,
)
async def get_transaction(
    transaction_id: str,
    request: Request,
    service: TransactionService = Depends(get_transaction_service)
) -> Any:
    """Get one transaction as a list of zero or one rows, without related records"""
    return await dispatch(request, service, transaction_id)


@router.put(
    "/{transaction_id}",
    response_model=TransactionEchoResponse,
    responses=ERROR_RESPONSES,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": Transaction.model_json_schema()}},
        }
    },
)
async def update_transaction(
    transaction_id: str,
    request: Request,
    service: TransactionService = Depends(get_transaction_service)
) -> Any:
    """Replace a transaction with the submitted record"""
    return await dispatch(request, service, transaction_id)


@router.delete("/{transaction_id}", response_model=BaseResponse, responses=ERROR_RESPONSES)
async def delete_transaction(
    transaction_id: str,
    request: Request,
    service: TransactionService = Depends(get_transaction_service)
) -> Any:
    """Delete a transaction"""
    return await dispatch(request, service, transaction_id)


@router.api_route("", methods=UNDOCUMENTED_COLLECTION_METHODS, include_in_schema=False)
@router.api_route(
    "/",
    methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    include_in_schema=False,
)
async def collection_fallback(
    request: Request,
    service: TransactionService = Depends(get_transaction_service)
) -> Any:
    return await dispatch(request, service)


@router.api_route(
    "/{transaction_id}",
    methods=UNDOCUMENTED_ID_METHODS,
    include_in_schema=False,
)
async def item_fallback(
    transaction_id: str,
    request: Request,
    service: TransactionService = Depends(get_transaction_service)
) -> Any:
    return await dispatch(request, service, transaction_id)
