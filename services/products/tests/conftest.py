import os
import tempfile

_tmpdir = tempfile.mkdtemp(prefix="products-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_tmpdir, "products.db")
os.environ["ADMIN_KEY"] = "test-admin-key"

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, engine
from app.main import app

ADMIN_KEY = "test-admin-key"


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def admin_headers():
    return {"x-admin-key": ADMIN_KEY}


@pytest.fixture
def gql(client):
    def _run(query, variables=None, headers=None):
        r = client.post("/graphql", json={"query": query, "variables": variables or {}}, headers=headers or {})
        return r.json()
    return _run
