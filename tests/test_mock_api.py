"""Tests for the in-memory reference API."""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from fintrack.config import settings
from fintrack.mock_api import ALGORITHM, app, create_access_token, get_backend, verify_password

client = TestClient(app)


@pytest.fixture
def auth_headers():
    """Register a user and return bearer headers for it."""
    client.post("/users/", json={"email": "bob@example.com", "password": "pw"})
    response = client.post("/token", data={"username": "bob@example.com", "password": "pw"})
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def groceries(auth_headers):
    response = client.post("/categories/", json={"name": "Groceries"}, headers=auth_headers)
    return response.json()


def add_transaction(headers, category_id, amount, when, description="purchase"):
    response = client.post(
        "/transactions/",
        json={"amount": amount, "description": description, "category_id": category_id, "date": when},
        headers=headers,
    )
    assert response.status_code == 200
    return response.json()


def test_root_endpoint():
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_register_duplicate_email():
    client.post("/users/", json={"email": "dup@example.com", "password": "pw"})
    response = client.post("/users/", json={"email": "dup@example.com", "password": "pw"})
    
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


def test_login_wrong_password(auth_headers):
    response = client.post("/token", data={"username": "bob@example.com", "password": "nope"})
    assert response.status_code == 401


def test_requires_token():
    response = client.get("/categories/")
    assert response.status_code == 401


def test_token_is_signed_jwt(auth_headers):
    token = auth_headers["Authorization"].split(" ", 1)[1]
    claims = jwt.decode(token, settings.reference_secret_key, algorithms=[ALGORITHM])
    
    assert claims["sub"] == "bob@example.com"
    assert "exp" in claims


def test_passwords_are_salted():
    client.post("/users/", json={"email": "a@example.com", "password": "same"})
    client.post("/users/", json={"email": "b@example.com", "password": "same"})
    hashes = [u["password_hash"] for u in get_backend().users.values()]
    
    assert hashes[0] != hashes[1]
    assert hashes[0].startswith("$pbkdf2-sha256$")
    assert all(verify_password("same", h) for h in hashes)


def test_expired_token_rejected(auth_headers):
    token = create_access_token("bob@example.com", expires_delta=timedelta(seconds=-1))
    response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    
    assert response.status_code == 401
    assert response.json()["detail"] == "Could not validate credentials"


def test_tampered_token_rejected(auth_headers):
    forged = jwt.encode({"sub": "bob@example.com"}, "wrong-key", algorithm=ALGORITHM)
    response = client.get("/users/me", headers={"Authorization": f"Bearer {forged}"})
    
    assert response.status_code == 401


def test_users_me(auth_headers):
    response = client.get("/users/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == "bob@example.com"


def test_category_crud(auth_headers):
    """Create, rename and delete a category."""
    created = client.post("/categories/", json={"name": "Rent", "description": "Monthly"}, headers=auth_headers)
    assert created.status_code == 200
    category_id = created.json()["id"]
    
    updated = client.put(f"/categories/{category_id}", json={"name": "Housing"}, headers=auth_headers)
    assert updated.json()["name"] == "Housing"
    assert updated.json()["description"] is None
    
    deleted = client.delete(f"/categories/{category_id}", headers=auth_headers)
    assert deleted.status_code == 204
    
    missing = client.get(f"/categories/{category_id}", headers=auth_headers)
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Category not found"


def test_transaction_requires_known_category(auth_headers):
    response = client.post(
        "/transactions/",
        json={"amount": 5, "description": "x", "category_id": 999, "date": "2024-03-01T00:00:00Z"},
        headers=auth_headers,
    )
    assert response.status_code == 404


def test_transactions_newest_first(auth_headers, groceries):
    add_transaction(auth_headers, groceries["id"], 10, "2024-03-01T10:00:00Z", "older")
    add_transaction(auth_headers, groceries["id"], 20, "2024-03-10T10:00:00Z", "newer")
    
    response = client.get("/transactions/", headers=auth_headers)
    descriptions = [t["description"] for t in response.json()]
    assert descriptions == ["newer", "older"]


def test_budget_status_only_active(auth_headers, groceries):
    """Budgets outside today's date are left out of the status list."""
    client.post("/budgets/", json={
        "name": "March food", "amount": 100, "category_id": groceries["id"],
        "start_date": "2024-03-01", "end_date": "2024-03-31",
    }, headers=auth_headers)
    client.post("/budgets/", json={
        "name": "January food", "amount": 100, "category_id": groceries["id"],
        "start_date": "2024-01-01", "end_date": "2024-01-31",
    }, headers=auth_headers)
    add_transaction(auth_headers, groceries["id"], 95.4, "2024-03-05T12:00:00Z")
    
    response = client.get("/budgets/status", headers=auth_headers)
    data = response.json()
    
    assert response.status_code == 200
    assert [b["name"] for b in data] == ["March food"]
    assert data[0]["spent"] == 95.4
    assert data[0]["percentage_used"] == 95.4
    assert data[0]["category"] == "Groceries"


def test_budget_end_before_start(auth_headers, groceries):
    response = client.post("/budgets/", json={
        "amount": 100, "category_id": groceries["id"],
        "start_date": "2024-03-31", "end_date": "2024-03-01",
    }, headers=auth_headers)
    assert response.status_code == 400


def test_spending_by_category(auth_headers, groceries):
    fuel = client.post("/categories/", json={"name": "Fuel"}, headers=auth_headers).json()
    add_transaction(auth_headers, groceries["id"], 30, "2024-03-02T12:00:00Z")
    add_transaction(auth_headers, fuel["id"], 10, "2024-03-03T12:00:00Z")
    add_transaction(auth_headers, fuel["id"], 500, "2024-02-03T12:00:00Z")
    
    response = client.get("/reports/spending-by-category", headers=auth_headers)
    data = response.json()
    
    assert data["total_spending"] == 40
    assert [c["category_name"] for c in data["spending_by_category"]] == ["Groceries", "Fuel"]
    assert data["spending_by_category"][0]["percentage"] == 75.0


def test_monthly_spending(auth_headers, groceries):
    add_transaction(auth_headers, groceries["id"], 50, "2024-02-10T12:00:00Z")
    add_transaction(auth_headers, groceries["id"], 25, "2024-03-10T12:00:00Z")
    
    response = client.get("/reports/monthly-spending", params={"months": 3}, headers=auth_headers)
    months = response.json()["monthly_spending"]
    
    assert [m["month"] for m in months] == ["2024-01", "2024-02", "2024-03"]
    assert [m["total"] for m in months] == [0, 50, 25]
    assert months[-1]["month_name"] == "Mar 2024"


def test_transaction_trends_rejects_unknown_interval(auth_headers):
    response = client.get("/reports/transaction-trends", params={"interval": "hourly"}, headers=auth_headers)
    assert response.status_code == 422


def test_transaction_trends_daily(auth_headers, groceries):
    add_transaction(auth_headers, groceries["id"], 5, "2024-03-15T08:00:00Z")
    add_transaction(auth_headers, groceries["id"], 7, "2024-03-15T18:00:00Z")
    
    response = client.get(
        "/reports/transaction-trends",
        params={"interval": "daily", "timeframe": 3},
        headers=auth_headers,
    )
    data = response.json()
    
    assert len(data["trend_data"]) == 3
    assert data["trend_data"][-1] == {"interval": "2024-03-15", "total_amount": 12, "transaction_count": 2}


def test_spending_insights(auth_headers, groceries):
    add_transaction(auth_headers, groceries["id"], 100, "2024-02-10T12:00:00Z")
    add_transaction(auth_headers, groceries["id"], 150, "2024-03-10T12:00:00Z")
    
    response = client.get("/reports/spending-insights", headers=auth_headers)
    data = response.json()
    
    assert data["this_month_spending"] == 150
    assert data["month_over_month_change"] == 50.0
    assert data["biggest_expense_category"] == "Groceries"
    assert data["days_elapsed"] == 15
    assert data["days_in_month"] == 31
    assert data["average_daily_spending"] == 10.0


def test_budget_performance_forecast(auth_headers, groceries):
    client.post("/budgets/", json={
        "name": "March food", "amount": 310, "category_id": groceries["id"],
        "start_date": "2024-03-01", "end_date": "2024-03-31",
    }, headers=auth_headers)
    add_transaction(auth_headers, groceries["id"], 150, "2024-03-10T12:00:00Z")
    
    response = client.get("/reports/budget-performance", headers=auth_headers)
    perf = response.json()["budget_performance"][0]
    
    assert perf["is_active"] is True
    assert perf["days_remaining"] == 16
    assert perf["daily_burn_rate"] == 10.0
    assert perf["forecast_end_amount"] == 310.0
    assert perf["status"] == "On Track"
    assert perf["forecast_status"] == "Projected Over Budget"
