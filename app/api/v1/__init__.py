from .endpoints import transactions


__all__ = [
    "transactions",
]
