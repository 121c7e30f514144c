from __future__ import annotations
from app.core.logging import get_logger
from app.models.book import Book
from app.repos.book_repo import BookStore
from app.schemas.book import BookCreate, BookFilters, BookUpdate, DiscountResult

logger = get_logger(__name__)


def _normalize_filters(filters: BookFilters | None) -> BookFilters | None:
    """Trim text filters; blank text counts as not provided."""
    if filters is None:
        return None

    def _clean(value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    return filters.model_copy(
        update={
            "genre": _clean(filters.genre),
            "author": _clean(filters.author),
            "title": _clean(filters.title),
        }
    )


class BookService:
    def __init__(self, store: BookStore) -> None:
        self.store: BookStore = store

    # Create book
    def create_book(self, data: BookCreate) -> Book:
        book = self.store.create(data)
        logger.info("Book created", extra={"book_id": book.id})
        return book

    # List books
    def get_all_books(self, filters: BookFilters | None = None) -> list[Book]:
        return self.store.find_all(_normalize_filters(filters))

    # Get book
    def get_book_by_id(self, book_id: int) -> Book | None:
        return self.store.find_by_id(book_id)

    # Update book
    def update_book(self, book_id: int, data: BookUpdate) -> Book | None:
        book = self.store.update(book_id, data)
        if book is not None:
            logger.info("Book updated", extra={"book_id": book_id})
        return book

    # Delete book
    def delete_book(self, book_id: int) -> bool:
        deleted = self.store.delete(book_id)
        if deleted:
            logger.info("Book deleted", extra={"book_id": book_id})
        return deleted

    def calculate_discounted_price_for_genre(
        self, genre: str, discount_percentage: float
    ) -> DiscountResult | None:
        """
        Total price of every book in `genre` after applying the discount.

        Returns None when no book matches the genre. The discount is not
        range-checked here: callers validate it before calling.
        """
        books = self.store.find_by_genre(genre)
        if not books:
            return None

        total_original_price = sum(book.price for book in books)
        discount_factor = discount_percentage / 100
        total_discounted_price = total_original_price * (1 - discount_factor)

        logger.debug(
            "Genre discount computed",
            extra={"genre": genre, "books": len(books), "total_original_price": total_original_price},
        )
        return DiscountResult(
            genre=genre,
            discount_percentage=discount_percentage,
            total_discounted_price=round(total_discounted_price, 2),
        )
