"""CRUD endpoints for the collection resources."""
import logging
from decimal import Decimal
from typing import Any, Dict, Generic, List, Type, TypeVar

from pydantic import BaseModel

from fintrack.api.client import ApiClient, parse_list, parse_model
from fintrack.models.budget import Budget, BudgetCreate, BudgetStatus
from fintrack.models.category import Category, CategoryCreate
from fintrack.models.transaction import Transaction, TransactionCreate

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)
PayloadT = TypeVar("PayloadT", bound=BaseModel)


class ResourceApi(Generic[RecordT, PayloadT]):
    """List, get, create, update and delete against ``/<collection>/``."""
    
    collection: str = ""
    record_model: Type[BaseModel] = BaseModel
    
    def __init__(self, client: ApiClient):
        self.client = client
    
    @property
    def base_path(self) -> str:
        return f"/{self.collection}/"
    
    def item_path(self, record_id: Any) -> str:
        return f"/{self.collection}/{record_id}"
    
    def _parse(self, data: Dict[str, Any]) -> RecordT:
        return parse_model(self.record_model, data)
    
    def _payload(self, payload: PayloadT) -> Dict[str, Any]:
        return serialize_payload(payload)
    
    async def list(self, **params: Any) -> List[RecordT]:
        data = await self.client.get(self.base_path, params=params or None)
        return parse_list(self.record_model, data)
    
    async def get(self, record_id: Any) -> RecordT:
        data = await self.client.get(self.item_path(record_id))
        return self._parse(data)
    
    async def create(self, payload: PayloadT) -> RecordT:
        body = self._payload(payload)
        logger.debug("Creating %s", self.collection, extra={"payload": body})
        data = await self.client.post(self.base_path, json=body)
        return self._parse(data)
    
    async def update(self, record_id: Any, payload: PayloadT) -> RecordT:
        data = await self.client.put(self.item_path(record_id), json=self._payload(payload))
        return self._parse(data)
    
    async def delete(self, record_id: Any) -> None:
        await self.client.delete(self.item_path(record_id))


class TransactionsApi(ResourceApi[Transaction, TransactionCreate]):
    collection = "transactions"
    record_model = Transaction


class CategoriesApi(ResourceApi[Category, CategoryCreate]):
    collection = "categories"
    record_model = Category


class BudgetsApi(ResourceApi[Budget, BudgetCreate]):
    collection = "budgets"
    record_model = Budget
    
    async def status(self) -> List[BudgetStatus]:
        """Active budgets with spending figures."""
        data = await self.client.get(f"/{self.collection}/status")
        return parse_list(BudgetStatus, data)


def serialize_payload(payload: BaseModel) -> Dict[str, Any]:
    """JSON-ready dict; decimals go out as numbers."""
    body = payload.model_dump(mode="json")
    for key, value in payload:
        if isinstance(value, Decimal):
            body[key] = float(value)
    return body
