# tests/conftest.py
import os

# must be set before luxejewel is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["MOCK_PAYMENT_DELAY_SECONDS"] = "0"
os.environ["AI_RETRY_DELAY_SECONDS"] = "0"
for key in ("GOOGLE_API_KEY", "GROQ_API_KEY", "CEREBRAS_API_KEY", "OPENROUTER_API_KEY", "ADMIN_EMAIL", "ADMIN_PASSWORD"):
    os.environ[key] = ""

import pytest
from fastapi.testclient import TestClient

from luxejewel.data.database import SessionLocal, create_tables, drop_tables, get_db
from luxejewel.data.seed import seed
from luxejewel.domain.schemas import LoginIn, RegisterIn
from luxejewel.main import app
from luxejewel.repos.product_repo import ProductRepo
from luxejewel.services.auth_service import AuthService


@pytest.fixture
def db():
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_tables()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def catalog(db):
    seed(db)
    return {p.slug: p for p in ProductRepo(db).list_products(active_only=False)}


@pytest.fixture
def customer(db):
    return AuthService(db).register(RegisterIn(email="jane@example.com", password="sparkle123", full_name="Jane Doe"))


@pytest.fixture
def admin_token(db):
    svc = AuthService(db)
    svc.register(RegisterIn(email="admin@example.com", password="adminpass1", full_name="Admin"), role="admin")
    return svc.login(LoginIn(email="admin@example.com", password="adminpass1"))["access_token"]


@pytest.fixture
def customer_token(db, customer):
    return AuthService(db).login(LoginIn(email="jane@example.com", password="sparkle123"))["access_token"]
