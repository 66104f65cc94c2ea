from enum import Enum
from typing import Any, Dict, Optional

from app.core.logging import get_logger
from app.db.store import TransactionStore


CREATED_MESSAGE = "transaction created successfully"
DELETED_MESSAGE = "transaction deleted successfully"

# Methods whose request body is parsed as JSON, with or without an id
BODY_METHODS = ("POST", "PUT")


class TransactionOperation(str, Enum):
    READ_ONE = "read_one"
    READ_ALL = "read_all"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


def resolve_operation(method: str, transaction_id: Optional[str]) -> TransactionOperation:
    """Map an HTTP method and optional id onto an operation.
    
    Rules are checked in order and the first match wins. Combinations that
    match nothing (``POST`` with an id, ``PATCH``, ``DELETE`` without an id)
    list all transactions, as existing clients expect.
    """
    method = method.upper()
    
    if transaction_id and method == "GET":
        return TransactionOperation.READ_ONE
    if transaction_id and method == "PUT":
        return TransactionOperation.UPDATE
    if transaction_id and method == "DELETE":
        return TransactionOperation.DELETE
    if not transaction_id and method == "POST":
        return TransactionOperation.CREATE
    return TransactionOperation.READ_ALL


class TransactionService:
    """Runs one transaction operation against a store and builds the response payload"""
    
    def __init__(self, store: TransactionStore):
        self.store = store
        self.logger = get_logger("TransactionService")
    
    async def handle(
        self,
        method: str,
        transaction_id: Optional[str] = None,
        transaction: Any = None
    ) -> Any:
        operation = resolve_operation(method, transaction_id)
        self.logger.debug(
            "Resolved transaction operation",
            operation=operation.value,
            transaction_id=transaction_id,
        )
        
        if operation is TransactionOperation.READ_ONE:
            return await self.get_transaction(transaction_id)
        if operation is TransactionOperation.UPDATE:
            return await self.update_transaction(transaction_id, transaction)
        if operation is TransactionOperation.DELETE:
            return await self.delete_transaction(transaction_id)
        if operation is TransactionOperation.CREATE:
            return await self.create_transaction(transaction)
        return await self.get_all_transactions()
    
    async def get_transaction(self, transaction_id: str) -> list:
        return await self.store.fetch_one(transaction_id)
    
    async def get_all_transactions(self) -> list:
        transactions = await self.store.fetch_all_enriched()
        self.logger.info("Retrieved transactions", count=len(transactions))
        return transactions
    
    async def create_transaction(self, transaction: Dict[str, Any]) -> Dict[str, Any]:
        await self.store.insert(transaction)
        self.logger.info("Transaction created")
        return {"success": True, "message": CREATED_MESSAGE}
    
    async def update_transaction(
        self,
        transaction_id: str,
        transaction: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Replace the stored row; the response echoes what was submitted"""
        await self.store.replace(transaction_id, transaction)
        self.logger.info("Transaction replaced", transaction_id=transaction_id)
        return {"transaction": transaction}
    
    async def delete_transaction(self, transaction_id: str) -> Dict[str, Any]:
        await self.store.delete(transaction_id)
        self.logger.info("Transaction deleted", transaction_id=transaction_id)
        return {"success": True, "message": DELETED_MESSAGE}
