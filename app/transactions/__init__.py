from .service import (
    BODY_METHODS,
    CREATED_MESSAGE,
    DELETED_MESSAGE,
    TransactionOperation,
    TransactionService,
    resolve_operation,
)

__all__ = [
    "BODY_METHODS",
    "CREATED_MESSAGE",
    "DELETED_MESSAGE",
    "TransactionOperation",
    "TransactionService",
    "resolve_operation",
]
