"""Transaction data models."""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class TransactionCreate(BaseModel):
    """Payload sent when creating or updating a transaction."""
    
    amount: Decimal = Field(..., description="Transaction amount")
    description: str = Field(..., description="Free-text description")
    category_id: int = Field(..., description="Referenced category id")
    date: datetime = Field(..., description="When the transaction happened")


class Transaction(TransactionCreate):
    """Transaction record as returned by the API."""
    
    model_config = ConfigDict(extra="allow")
    
    id: int
    description: str = ""
    category_id: Optional[int] = None
