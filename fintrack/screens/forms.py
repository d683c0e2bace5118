"""Form state for the edit dialogs.

Fields hold what the user typed; ``to_payload`` converts them into the
request model and raises ``ValidationError`` when they do not parse.
"""
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from fintrack.models.budget import Budget, BudgetCreate
from fintrack.models.category import Category, CategoryCreate
from fintrack.models.transaction import Transaction, TransactionCreate
from fintrack.utils.timestamp import add_months, parse_date, parse_timestamp


def _today() -> date:
    return date.today()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _id_text(value: Optional[int]) -> str:
    return "" if value is None else str(value)


class TransactionForm(BaseModel):
    amount: str = ""
    description: str = ""
    category_id: str = ""
    date: datetime = Field(default_factory=_now)
    
    @classmethod
    def from_record(cls, tx: Transaction) -> "TransactionForm":
        return cls(
            amount=str(tx.amount),
            description=tx.description,
            category_id=_id_text(tx.category_id),
            date=tx.date,
        )
    
    def to_payload(self) -> TransactionCreate:
        return TransactionCreate(
            amount=self.amount.strip(),
            description=self.description,
            category_id=self.category_id,
            date=parse_timestamp(self.date),
        )


class CategoryForm(BaseModel):
    name: str = ""
    description: str = ""
    
    @classmethod
    def from_record(cls, category: Category) -> "CategoryForm":
        return cls(name=category.name, description=category.description or "")
    
    def to_payload(self) -> CategoryCreate:
        return CategoryCreate(
            name=self.name.strip(),
            description=self.description.strip() or None,
        )


class BudgetForm(BaseModel):
    name: str = ""
    amount: str = ""
    category_id: str = ""
    start_date: Optional[date] = Field(default_factory=_today)
    end_date: Optional[date] = Field(default_factory=lambda: add_months(_today(), 1))
    
    @classmethod
    def from_record(cls, budget: Budget) -> "BudgetForm":
        return cls(
            name=budget.name or "",
            amount=str(budget.amount),
            category_id=_id_text(budget.category_id),
            start_date=budget.start_date,
            end_date=budget.end_date,
        )
    
    def missing_required(self) -> bool:
        return not self.amount.strip() or not self.category_id.strip()
    
    def to_payload(self) -> BudgetCreate:
        if self.start_date is None or self.end_date is None:
            raise ValueError("start_date and end_date are required")
        return BudgetCreate(
            name=self.name.strip() or None,
            amount=self.amount.strip(),
            category_id=self.category_id,
            start_date=parse_date(self.start_date),
            end_date=parse_date(self.end_date),
        )
