from typing import Any
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import CheckConstraint, Float, Integer, Text
from app.models.base import Base

# Largest id a SQLite INTEGER column can hold
MAX_BOOK_ID: int = 2**63 - 1

#Book
class Book(Base):
    __tablename__: str = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    genre: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)

    # AUTOINCREMENT keeps ids of deleted rows from being handed out again
    __table_args__: tuple[Any, ...] = (
        CheckConstraint("price > 0", name="books_price_positive"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title={self.title!r}, genre={self.genre!r}, price={self.price!r})"
