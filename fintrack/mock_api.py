"""In-memory reference implementation of the finance REST API.

Serves the same endpoints the client calls so the client can be developed and
tested without the real backend:

    uvicorn fintrack.mock_api:app --reload --port 8000

State lives in process memory and is lost on restart.
"""
import calendar
import logging
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from fintrack.config import settings
from fintrack.models.budget import BudgetCreate
from fintrack.models.category import CategoryCreate
from fintrack.models.transaction import TransactionCreate
from fintrack.services.budget_status import derive_budget_status
from fintrack.utils.timestamp import add_months

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class UserCreate(BaseModel):
    email: str
    password: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """Signed JWT carrying ``sub`` and ``exp``."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.reference_token_minutes))
    return jwt.encode({"sub": subject, "exp": expire}, settings.reference_secret_key, algorithm=ALGORITHM)


def _round(value: float) -> float:
    return round(value, 2)


class InMemoryBackend:
    """Per-user records. Tokens are stateless JWTs and are not stored."""

    def __init__(self, today: Callable[[], date] = date.today):
        self.today = today
        self.users: Dict[int, Dict[str, Any]] = {}
        self.categories: Dict[int, Dict[str, Any]] = {}
        self.transactions: Dict[int, Dict[str, Any]] = {}
        self.budgets: Dict[int, Dict[str, Any]] = {}
        self._next_id = defaultdict(int)

    def next_id(self, kind: str) -> int:
        self._next_id[kind] += 1
        return self._next_id[kind]

    # Users

    def create_user(self, email: str, password: str) -> Dict[str, Any]:
        if any(u["email"] == email for u in self.users.values()):
            raise HTTPException(status_code=400, detail="Email already registered")
        user = {
            "id": self.next_id("user"),
            "email": email,
            "password_hash": hash_password(password),
            "is_active": True,
        }
        self.users[user["id"]] = user
        return user

    def authenticate(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        for user in self.users.values():
            if user["email"] == email and verify_password(password, user["password_hash"]):
                return user
        return None

    def issue_token(self, user: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "access_token": create_access_token(user["email"]),
            "token_type": "bearer",
            "expires_in": settings.reference_token_minutes * 60,
        }

    def user_for_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Resolve a bearer token; bad signatures and expired tokens give None."""
        try:
            payload = jwt.decode(token, settings.reference_secret_key, algorithms=[ALGORITHM])
        except JWTError as e:
            logger.info("Rejected token: %s", e)
            return None
        email = payload.get("sub")
        for user in self.users.values():
            if user["email"] == email:
                return user
        return None

    # Records

    def owned(self, table: Dict[int, Dict[str, Any]], user_id: int) -> List[Dict[str, Any]]:
        return [r for r in table.values() if r["owner_id"] == user_id]

    def get_owned(self, table: Dict[int, Dict[str, Any]], record_id: int, user_id: int, label: str) -> Dict[str, Any]:
        record = table.get(record_id)
        if record is None or record["owner_id"] != user_id:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return record

    def require_category(self, category_id: int, user_id: int) -> Dict[str, Any]:
        return self.get_owned(self.categories, category_id, user_id, "Category")

    def category_name(self, category_id: Optional[int]) -> str:
        category = self.categories.get(category_id)
        return category["name"] if category else "Uncategorized"

    def spending(
        self,
        user_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        category_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        rows = []
        for tx in self.owned(self.transactions, user_id):
            day = tx["date"].date()
            if start and day < start:
                continue
            if end and day > end:
                continue
            if category_id is not None and tx["category_id"] != category_id:
                continue
            rows.append(tx)
        return rows


_backend = InMemoryBackend()


def get_backend() -> InMemoryBackend:
    return _backend


def reset_backend(today: Callable[[], date] = date.today) -> InMemoryBackend:
    """Drop all state (tests call this between cases)."""
    global _backend
    _backend = InMemoryBackend(today=today)
    return _backend


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/token")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    backend: InMemoryBackend = Depends(get_backend),
) -> Dict[str, Any]:
    user = backend.user_for_token(token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def _public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": user["id"], "email": user["email"], "is_active": user["is_active"]}


def _public(record: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in record.items() if k != "owner_id"}


app = FastAPI(title="fintrack reference API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "fintrack reference API", "version": "1.0.0"}


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

@app.post("/token")
async def login(
    form: OAuth2PasswordRequestForm = Depends(),
    backend: InMemoryBackend = Depends(get_backend),
):
    user = backend.authenticate(form.username, form.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return backend.issue_token(user)


@app.post("/users/")
async def register(payload: UserCreate, backend: InMemoryBackend = Depends(get_backend)):
    return _public_user(backend.create_user(payload.email, payload.password))


@app.get("/users/me")
async def read_me(user: Dict[str, Any] = Depends(get_current_user)):
    return _public_user(user)


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

@app.get("/categories/")
async def list_categories(
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    return [_public(c) for c in backend.owned(backend.categories, user["id"])]


@app.post("/categories/")
async def create_category(
    payload: CategoryCreate,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    if any(c["name"] == payload.name for c in backend.owned(backend.categories, user["id"])):
        raise HTTPException(status_code=400, detail="Category already exists")
    category = {"id": backend.next_id("category"), "owner_id": user["id"], **payload.model_dump()}
    backend.categories[category["id"]] = category
    return _public(category)


@app.get("/categories/{category_id}")
async def read_category(
    category_id: int,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    return _public(backend.require_category(category_id, user["id"]))


@app.put("/categories/{category_id}")
async def update_category(
    category_id: int,
    payload: CategoryCreate,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    category = backend.require_category(category_id, user["id"])
    category.update(payload.model_dump())
    return _public(category)


@app.delete("/categories/{category_id}", status_code=204)
async def delete_category(
    category_id: int,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    backend.require_category(category_id, user["id"])
    del backend.categories[category_id]
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

def _transaction_record(payload: TransactionCreate) -> Dict[str, Any]:
    tx_date = payload.date if payload.date.tzinfo else payload.date.replace(tzinfo=timezone.utc)
    return {
        "amount": float(payload.amount),
        "description": payload.description,
        "category_id": payload.category_id,
        "date": tx_date,
    }


@app.get("/transactions/")
async def list_transactions(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    category_id: Optional[int] = None,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    rows = backend.owned(backend.transactions, user["id"])
    if category_id is not None:
        rows = [t for t in rows if t["category_id"] == category_id]
    rows.sort(key=lambda t: t["date"], reverse=True)
    return [_public(t) for t in rows[skip:skip + limit]]


@app.post("/transactions/")
async def create_transaction(
    payload: TransactionCreate,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    backend.require_category(payload.category_id, user["id"])
    tx = {"id": backend.next_id("transaction"), "owner_id": user["id"], **_transaction_record(payload)}
    backend.transactions[tx["id"]] = tx
    return _public(tx)


@app.get("/transactions/{transaction_id}")
async def read_transaction(
    transaction_id: int,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    return _public(backend.get_owned(backend.transactions, transaction_id, user["id"], "Transaction"))


@app.put("/transactions/{transaction_id}")
async def update_transaction(
    transaction_id: int,
    payload: TransactionCreate,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    tx = backend.get_owned(backend.transactions, transaction_id, user["id"], "Transaction")
    backend.require_category(payload.category_id, user["id"])
    tx.update(_transaction_record(payload))
    return _public(tx)


@app.delete("/transactions/{transaction_id}", status_code=204)
async def delete_transaction(
    transaction_id: int,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    backend.get_owned(backend.transactions, transaction_id, user["id"], "Transaction")
    del backend.transactions[transaction_id]
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Budgets
# ---------------------------------------------------------------------------

def _budget_record(payload: BudgetCreate) -> Dict[str, Any]:
    if payload.end_date < payload.start_date:
        raise HTTPException(status_code=400, detail="End date must be after start date")
    return {
        "name": payload.name,
        "amount": float(payload.amount),
        "category_id": payload.category_id,
        "start_date": payload.start_date,
        "end_date": payload.end_date,
    }


def _budget_spent(backend: InMemoryBackend, budget: Dict[str, Any]) -> float:
    rows = backend.spending(budget["owner_id"], budget["start_date"], budget["end_date"], budget["category_id"])
    return _round(sum(t["amount"] for t in rows))


def _percentage(part: float, whole: float) -> float:
    return _round(part / whole * 100) if whole else 0.0


@app.get("/budgets/")
async def list_budgets(
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    return [_public(b) for b in backend.owned(backend.budgets, user["id"])]


@app.get("/budgets/status")
async def budget_status(
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    """Active budgets with what has been spent against them."""
    today = backend.today()
    result = []
    for budget in backend.owned(backend.budgets, user["id"]):
        if not budget["start_date"] <= today <= budget["end_date"]:
            continue
        spent = _budget_spent(backend, budget)
        result.append({
            **_public(budget),
            "category": backend.category_name(budget["category_id"]),
            "spent": spent,
            "percentage_used": _percentage(spent, budget["amount"]),
        })
    return result


@app.post("/budgets/")
async def create_budget(
    payload: BudgetCreate,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    backend.require_category(payload.category_id, user["id"])
    budget = {"id": backend.next_id("budget"), "owner_id": user["id"], **_budget_record(payload)}
    backend.budgets[budget["id"]] = budget
    return _public(budget)


@app.get("/budgets/{budget_id}")
async def read_budget(
    budget_id: int,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    return _public(backend.get_owned(backend.budgets, budget_id, user["id"], "Budget"))


@app.put("/budgets/{budget_id}")
async def update_budget(
    budget_id: int,
    payload: BudgetCreate,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    budget = backend.get_owned(backend.budgets, budget_id, user["id"], "Budget")
    backend.require_category(payload.category_id, user["id"])
    budget.update(_budget_record(payload))
    return _public(budget)


@app.delete("/budgets/{budget_id}", status_code=204)
async def delete_budget(
    budget_id: int,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    backend.get_owned(backend.budgets, budget_id, user["id"], "Budget")
    del backend.budgets[budget_id]
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

def _month_start(d: date) -> date:
    return d.replace(day=1)


def _month_end(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


@app.get("/reports/spending-by-category")
async def spending_by_category(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    """Totals per category, largest first. Defaults to the current month."""
    today = backend.today()
    start = start_date or _month_start(today)
    end = end_date or today

    totals: Dict[Optional[int], float] = defaultdict(float)
    for tx in backend.spending(user["id"], start, end):
        totals[tx["category_id"]] += tx["amount"]
    total_spending = sum(totals.values())

    rows = [
        {
            "category_id": category_id,
            "category_name": backend.category_name(category_id),
            "total": _round(total),
            "percentage": _percentage(total, total_spending),
        }
        for category_id, total in totals.items()
    ]
    rows.sort(key=lambda r: r["total"], reverse=True)
    return {
        "start_date": start,
        "end_date": end,
        "total_spending": _round(total_spending),
        "spending_by_category": rows,
    }


@app.get("/reports/monthly-spending")
async def monthly_spending(
    months: int = Query(6, ge=1, le=60),
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    """One total per calendar month, oldest first, ending with the current month."""
    current = _month_start(backend.today())
    result = []
    for offset in range(months - 1, -1, -1):
        start = add_months(current, -offset)
        rows = backend.spending(user["id"], start, _month_end(start))
        result.append({
            "month": start.strftime("%Y-%m"),
            "month_name": start.strftime("%b %Y"),
            "total": _round(sum(t["amount"] for t in rows)),
        })
    return {"monthly_spending": result}


@app.get("/reports/transaction-trends")
async def transaction_trends(
    interval: str = Query("monthly", pattern="^(daily|weekly|monthly)$"),
    timeframe: int = Query(12, ge=1, le=366),
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    """Amount and count per day, week (Monday start) or month, oldest first."""
    today = backend.today()
    buckets = []
    for offset in range(timeframe - 1, -1, -1):
        if interval == "daily":
            start = end = today - timedelta(days=offset)
            label = start.isoformat()
        elif interval == "weekly":
            start = today - timedelta(days=today.weekday()) - timedelta(weeks=offset)
            end = start + timedelta(days=6)
            label = f"Week of {start.isoformat()}"
        else:
            start = add_months(_month_start(today), -offset)
            end = _month_end(start)
            label = start.strftime("%b %Y")
        rows = backend.spending(user["id"], start, end)
        buckets.append({
            "interval": label,
            "total_amount": _round(sum(t["amount"] for t in rows)),
            "transaction_count": len(rows),
        })
    return {"interval": interval, "timeframe": timeframe, "trend_data": buckets}


@app.get("/reports/budget-performance")
async def budget_performance(
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    """Spend, burn rate and end-of-period forecast for every budget."""
    today = backend.today()
    result = []
    for budget in backend.owned(backend.budgets, user["id"]):
        spent = _budget_spent(backend, budget)
        amount = budget["amount"]
        is_active = budget["start_date"] <= today <= budget["end_date"]
        total_days = (budget["end_date"] - budget["start_date"]).days + 1
        elapsed = min(max((today - budget["start_date"]).days + 1, 0), total_days)
        burn_rate = spent / elapsed if elapsed else 0.0
        forecast = burn_rate * total_days
        result.append({
            "budget_id": budget["id"],
            "budget_name": budget["name"],
            "category": backend.category_name(budget["category_id"]),
            "start_date": budget["start_date"],
            "end_date": budget["end_date"],
            "is_active": is_active,
            "days_remaining": max((budget["end_date"] - today).days, 0) if is_active else 0,
            "budget_amount": _round(amount),
            "spent": spent,
            "remaining": _round(amount - spent),
            "percentage_used": _percentage(spent, amount),
            "status": "Over Budget" if spent > amount else "On Track",
            "daily_burn_rate": _round(burn_rate),
            "forecast_end_amount": _round(forecast),
            "forecast_status": derive_budget_status(_percentage(forecast, amount)),
        })
    return {"budget_performance": result}


@app.get("/reports/spending-insights")
async def spending_insights(
    user: Dict[str, Any] = Depends(get_current_user),
    backend: InMemoryBackend = Depends(get_backend),
):
    """This month against last month."""
    today = backend.today()
    this_start = _month_start(today)
    last_start = add_months(this_start, -1)

    this_month = backend.spending(user["id"], this_start, today)
    last_month = backend.spending(user["id"], last_start, _month_end(last_start))
    this_total = sum(t["amount"] for t in this_month)
    last_total = sum(t["amount"] for t in last_month)

    by_category: Dict[Optional[int], float] = defaultdict(float)
    for tx in this_month:
        by_category[tx["category_id"]] += tx["amount"]
    biggest = max(by_category.items(), key=lambda kv: kv[1]) if by_category else None

    days_elapsed = today.day
    return {
        "this_month_spending": _round(this_total),
        "month_over_month_change": _percentage(this_total - last_total, last_total),
        "biggest_expense_category": backend.category_name(biggest[0]) if biggest else None,
        "biggest_expense_amount": _round(biggest[1]) if biggest else 0.0,
        "average_daily_spending": _round(this_total / days_elapsed),
        "days_elapsed": days_elapsed,
        "days_in_month": calendar.monthrange(today.year, today.month)[1],
        "transaction_count": len(this_month),
        "average_transaction_amount": _round(this_total / len(this_month)) if this_month else 0.0,
    }


if __name__ == "__main__":
    import uvicorn
    from fintrack.logging_config import configure_logging

    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)
