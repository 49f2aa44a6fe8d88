import mongomock
import pytest
from fastapi.testclient import TestClient

from main import app, get_db


@pytest.fixture
def db():
    client = mongomock.MongoClient()
    yield client["modelingRelationships"]
    client.close()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()
