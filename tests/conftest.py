import uuid
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.api.deps import get_book_service
from app.repos.book_repo import BookStore
from app.schemas.book import BookCreate
from app.services.book_service import BookService


@pytest.fixture
def store():
    """A fresh, empty in-memory store for each test."""
    book_store = BookStore()
    try:
        yield book_store
    finally:
        book_store.close()


@pytest.fixture
def service(store):
    return BookService(store)


@pytest.fixture
def sample_books(store):
    """The four sample catalog entries, created in order (ids 1-4)."""
    return [
        store.create(BookCreate(title="To Kill a Mockingbird", author="Harper Lee", genre="Fiction", price=50.00)),
        store.create(BookCreate(title="1984", author="George Orwell", genre="Fiction", price=75.00)),
        store.create(BookCreate(title="Dune", author="Frank Herbert", genre="Science Fiction", price=40.00)),
        store.create(BookCreate(title="Sapiens", author="Yuval Noah Harari", genre="Non-Fiction", price=65.00)),
    ]


@pytest.fixture
def test_client(service):
    """Test client whose catalog is the per-test store (lifespan not run)."""
    app.dependency_overrides[get_book_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_book_service, None)


@pytest.fixture
def sample_book(test_client):
    """Create a sample book through the API."""
    unique_suffix = uuid.uuid4().hex[:8]
    book_data = {
        "title": f"Test Book {unique_suffix}",
        "author": "Test Author",
        "genre": "Fiction",
        "price": 29.99,
    }
    response = test_client.post("/api/v1/books", json=book_data)
    assert response.status_code == 201, f"Failed to create sample book: {response.text}"
    return response.json()


@pytest.fixture
def headers_with_correlation():
    """HTTP headers with correlation ID."""
    return {"X-Request-ID": str(uuid.uuid4())}
