from .store import (
    ENRICHED_SELECT,
    TRANSACTION_COLUMNS,
    TRANSACTION_RELATIONS,
    TRANSACTIONS_TABLE,
    StorageError,
    TransactionStore,
    full_replacement,
)
from .supabase_store import SupabaseTransactionStore

__all__ = [
    "ENRICHED_SELECT",
    "TRANSACTION_COLUMNS",
    "TRANSACTION_RELATIONS",
    "TRANSACTIONS_TABLE",
    "StorageError",
    "TransactionStore",
    "full_replacement",
    "SupabaseTransactionStore",
]
