from fastapi import Request
from app.services.book_service import BookService


# Catalog service created by the application lifespan
def get_book_service(request: Request) -> BookService:
    return request.app.state.book_service
