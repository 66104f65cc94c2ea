"""
Storage interface for the transactions table.

The hosted database does all querying, joining and constraint checking; a
store only forwards one call per request and reports failures as
``StorageError``.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


TRANSACTIONS_TABLE = "transactions"

TRANSACTION_COLUMNS = (
    "account_id",
    "customer_id",
    "purchase_order",
    "tax",
    "segment_id",
    "supplier_id",
    "reference",
    "description",
    "dpp",
    "ppn",
    "pph",
    "total",
    "debit",
    "credit",
    "remarks",
    "created_by_user_id",
)

# Foreign key column -> (referenced table, display column)
TRANSACTION_RELATIONS = {
    "account_id": ("accounts", "name"),
    "customer_id": ("customers", "name"),
    "segment_id": ("segments", "name"),
    "supplier_id": ("suppliers", "name"),
    "created_by_user_id": ("users", "username"),
}


def build_enriched_select() -> str:
    """PostgREST select that embeds each relation under its FK column name"""
    embeds = [
        f"{column}:{table}(id, {display})"
        for column, (table, display) in TRANSACTION_RELATIONS.items()
    ]
    return ", ".join(["*"] + embeds)


ENRICHED_SELECT = build_enriched_select()


class StorageError(Exception):
    """Failure reported by the storage collaborator"""
    
    def __init__(self, message: str, code: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class TransactionStore(ABC):
    """Table-scoped operations on transactions"""
    
    @abstractmethod
    async def fetch_one(self, transaction_id: str) -> List[Dict[str, Any]]:
        """Rows whose id equals ``transaction_id`` (all columns, no joins)"""
    
    @abstractmethod
    async def fetch_all_enriched(self) -> List[Dict[str, Any]]:
        """All rows with related records embedded"""
    
    @abstractmethod
    async def insert(self, transaction: Dict[str, Any]) -> None:
        """Insert one row; the id is assigned by storage"""
    
    @abstractmethod
    async def replace(self, transaction_id: str, transaction: Dict[str, Any]) -> None:
        """Overwrite the row matching ``transaction_id`` with ``transaction``"""
    
    @abstractmethod
    async def delete(self, transaction_id: str) -> None:
        """Remove the row matching ``transaction_id``"""


def full_replacement(transaction: Dict[str, Any]) -> Dict[str, Any]:
    """Row payload where every known column omitted by the caller is null"""
    if not isinstance(transaction, dict):
        raise ValueError("transaction body must be a JSON object")
    row = {column: None for column in TRANSACTION_COLUMNS}
    row.update(transaction)
    return row
