from app.repos.book_repo import BookStore
from app.schemas.book import BookCreate

SAMPLE_BOOKS: tuple[BookCreate, ...] = (
    BookCreate(title="To Kill a Mockingbird", author="Harper Lee", genre="Fiction", price=50.00),
    BookCreate(title="1984", author="George Orwell", genre="Fiction", price=75.00),
    BookCreate(title="Dune", author="Frank Herbert", genre="Science Fiction", price=40.00),
    BookCreate(title="Sapiens", author="Yuval Noah Harari", genre="Non-Fiction", price=65.00),
)


def seed_sample_books(store: BookStore) -> int:
    """Insert the sample catalog, returns the number of books added."""
    for data in SAMPLE_BOOKS:
        _ = store.create(data)
    return len(SAMPLE_BOOKS)
