from .book_repo import BookStore

__all__ = ["BookStore"]
