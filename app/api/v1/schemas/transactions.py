from typing import Optional
from decimal import Decimal
from pydantic import BaseModel, ConfigDict


class Transaction(BaseModel):
    """Transaction record as submitted on create and update.
    
    Documentation only: request bodies are forwarded to storage as parsed,
    and constraint checking happens there.
    """
    model_config = ConfigDict(extra="allow")
    
    account_id: int
    customer_id: int
    purchase_order: str
    tax: str
    segment_id: int
    supplier_id: int
    reference: str
    description: str
    dpp: Decimal
    ppn: Decimal
    pph: Decimal
    total: Decimal
    debit: Decimal
    credit: Decimal
    remarks: str
    created_by_user_id: int


class StoredTransaction(Transaction):
    """Row returned by read-one"""
    id: int


class NamedReference(BaseModel):
    id: int
    name: Optional[str] = None


class UserReference(BaseModel):
    id: int
    username: Optional[str] = None


class EnrichedTransaction(BaseModel):
    """Row returned by read-all, with related records embedded"""
    model_config = ConfigDict(extra="allow")
    
    id: int
    account_id: Optional[NamedReference] = None
    customer_id: Optional[NamedReference] = None
    segment_id: Optional[NamedReference] = None
    supplier_id: Optional[NamedReference] = None
    created_by_user_id: Optional[UserReference] = None


class TransactionEchoResponse(BaseModel):
    """Update response: the submitted body, not the stored row"""
    transaction: Transaction
