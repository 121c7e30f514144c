from fastapi import APIRouter, Depends, Path, Query, HTTPException, Response
from app.api.deps import get_book_service
from app.models.book import MAX_BOOK_ID
from app.services.book_service import BookService
from app.schemas.book import BookCreate, BookFilters, BookRead, BookUpdate, DiscountResult
from typing import Annotated
from starlette.status import (
    HTTP_201_CREATED,
    HTTP_204_NO_CONTENT,
    HTTP_404_NOT_FOUND,
)
router = APIRouter(prefix="/books", tags=["books"])

Service = Annotated[BookService, Depends(get_book_service)]
BookId = Annotated[int, Path(ge=1, le=MAX_BOOK_ID)]


def _book_not_found(book_id: int) -> HTTPException:
    return HTTPException(status_code=HTTP_404_NOT_FOUND, detail=f"Book with ID {book_id} not found.")


@router.post("", response_model=BookRead, status_code=HTTP_201_CREATED)
def create_book(data: BookCreate, service: Service):
    return service.create_book(data)


@router.get("", response_model=list[BookRead])
def list_books(
    service: Service,
    genre: Annotated[str | None, Query()] = None,
    author: Annotated[str | None, Query()] = None,
    title: Annotated[str | None, Query()] = None,
    min_price: Annotated[float | None, Query()] = None,
    max_price: Annotated[float | None, Query()] = None,
):
    filters = BookFilters(
        genre=genre,
        author=author,
        title=title,
        min_price=min_price,
        max_price=max_price,
    )
    return service.get_all_books(filters)


# Must be declared before /{book_id}
@router.get("/discounted-price", response_model=DiscountResult)
def calculate_discounted_price(
    service: Service,
    genre: Annotated[str, Query(min_length=1, pattern=r"\S")],
    discount: Annotated[float, Query(ge=0, le=100, allow_inf_nan=False)],
):
    """Total price of all books in a genre after a percentage discount."""
    result = service.calculate_discounted_price_for_genre(genre, discount)
    if result is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=f"No books found for genre: {genre}")
    return result


@router.get("/{book_id}", response_model=BookRead)
def get_book(book_id: BookId, service: Service):
    book = service.get_book_by_id(book_id)
    if book is None:
        raise _book_not_found(book_id)
    return book


@router.put("/{book_id}", response_model=BookRead)
def update_book(book_id: BookId, data: BookUpdate, service: Service):
    book = service.update_book(book_id, data)
    if book is None:
        raise _book_not_found(book_id)
    return book


@router.delete("/{book_id}", status_code=HTTP_204_NO_CONTENT)
def delete_book(book_id: BookId, service: Service) -> Response:
    if not service.delete_book(book_id):
        raise _book_not_found(book_id)
    return Response(status_code=HTTP_204_NO_CONTENT)
