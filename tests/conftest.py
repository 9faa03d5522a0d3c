"""
Shared test fixtures: throwaway SQLite database, test client, sample quotation.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from interior_quotes.database import Base, get_db
from interior_quotes.main import app


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def quotation(client):
    """Create a draft quotation and return its JSON."""
    response = client.post("/api/quotations/", json={
        "project_name": "Lakeview 3BHK",
        "project_type": "3BHK",
        "client_name": "A. Sharma",
        "client_email": "sharma@example.com",
        "project_address": "Flat 402, Lakeview Residency, Hyderabad",
        "build_type": "handmade",
    })
    assert response.status_code == 200
    return response.json()
