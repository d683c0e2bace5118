"""Budget data models."""
from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class BudgetCreate(BaseModel):
    """Payload sent when creating or updating a budget."""
    
    name: Optional[str] = Field(None, description="Optional display name")
    amount: Decimal = Field(..., description="Budgeted amount")
    category_id: int = Field(..., description="Referenced category id")
    start_date: date
    end_date: date


class Budget(BudgetCreate):
    """Budget record as returned by the API."""
    
    model_config = ConfigDict(extra="allow")
    
    id: int


class BudgetStatus(Budget):
    """Active budget with server-computed spending figures."""
    
    spent: Decimal = Field(default=Decimal("0"), description="Amount spent so far")
    percentage_used: float = Field(default=0.0, description="Share of the budget already spent, may exceed 100")
    category: Optional[str] = Field(None, description="Category name resolved by the server")
