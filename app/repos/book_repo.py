import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import cast

from sqlalchemy import delete, func, select, true
from sqlalchemy.engine import CursorResult
from sqlalchemy.orm import Session
from sqlalchemy.sql.expression import ColumnElement

from app.db.session import build_engine, build_session_factory
from app.models.base import Base
from app.models.book import Book, MAX_BOOK_ID
from app.schemas.book import BookCreate, BookFilters, BookUpdate


def _contains_folded(column: ColumnElement[str], needle: str) -> ColumnElement[bool]:
    # instr() matches literally, no LIKE wildcards
    return func.instr(func.casefold(column), needle.casefold()) > 0


def _valid_id(book_id: int) -> bool:
    return 0 < book_id <= MAX_BOOK_ID


def _filter_clauses(filters: BookFilters | None) -> list[ColumnElement[bool]]:
    """
    One predicate per filter field; a missing or empty field matches everything.
    """
    f = filters or BookFilters()
    return [
        func.casefold(Book.genre) == f.genre.casefold() if f.genre else true(),
        _contains_folded(Book.author, f.author) if f.author else true(),
        _contains_folded(Book.title, f.title) if f.title else true(),
        Book.price >= f.min_price if f.min_price is not None else true(),
        Book.price <= f.max_price if f.max_price is not None else true(),
    ]


class BookStore:
    """
    Owns the book collection.

    Each instance has its own database (in-memory SQLite by default), so
    stores never share state. Every operation holds the store lock for
    its whole duration; ids come from an AUTOINCREMENT counter and are
    never reused after a delete.

    Returned books are detached snapshots: changing them does not change
    the store.
    """

    def __init__(self, database_url: str = "sqlite://") -> None:
        self._engine = build_engine(database_url)
        Base.metadata.create_all(self._engine)
        self._session_factory = build_session_factory(self._engine)
        self._lock = threading.RLock()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with self._lock, self._session_factory() as db:
            yield db

    def close(self) -> None:
        """Release the engine; an in-memory catalog is gone afterwards."""
        with self._lock:
            self._engine.dispose()

    # Create a new book
    def create(self, data: BookCreate) -> Book:
        with self._session() as db:
            book = Book(**data.model_dump())
            db.add(book)
            db.commit()
            db.refresh(book)
            return book

    # List books, optionally filtered
    def find_all(self, filters: BookFilters | None = None) -> list[Book]:
        stmt = select(Book).where(*_filter_clauses(filters)).order_by(Book.id)
        with self._session() as db:
            return list(db.scalars(stmt).all())

    # Get a book by ID
    def find_by_id(self, book_id: int) -> Book | None:
        if not _valid_id(book_id):
            return None
        with self._session() as db:
            return db.get(Book, book_id)

    # Merge the provided fields onto an existing book
    def update(self, book_id: int, data: BookUpdate) -> Book | None:
        if not _valid_id(book_id):
            return None
        changes = data.model_dump(exclude_unset=True)
        with self._session() as db:
            book = db.get(Book, book_id)
            if book is None:
                return None
            for field, value in changes.items():
                setattr(book, field, value)
            db.commit()
            db.refresh(book)
            return book

    # Delete a book by ID
    def delete(self, book_id: int) -> bool:
        if not _valid_id(book_id):
            return False
        with self._session() as db:
            result = cast(CursorResult[object], db.execute(delete(Book).where(Book.id == book_id)))
            db.commit()
            return result.rowcount > 0

    # Books of a genre, case-insensitive exact match
    def find_by_genre(self, genre: str) -> list[Book]:
        stmt = (
            select(Book)
            .where(func.casefold(Book.genre) == genre.casefold())
            .order_by(Book.id)
        )
        with self._session() as db:
            return list(db.scalars(stmt).all())
