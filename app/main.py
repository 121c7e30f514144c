from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.middleware_correlation import CorrelationIdMiddleware
from app.core.logging import setup_logging, get_logger
from app.core.errors import register_exception_handlers
from app.db.seed import seed_sample_books
from app.repos.book_repo import BookStore
from app.services.book_service import BookService

# Routers
from app.api.routes.books import router as books_router


setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    store = BookStore(settings.DATABASE_URL)
    if settings.SEED_SAMPLE_BOOKS:
        count = seed_sample_books(store)
        logger.info("Seeded sample catalog", extra={"books": count})
    app.state.book_service = BookService(store)
    try:
        yield
    finally:
        store.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Bookstore Catalog API - manage books and price whole genres at a discount.",
    version="1.0.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# CORS middleware - allow docs UI to make API requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:8000", "http://127.0.0.1:8000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middlewares
app.add_middleware(CorrelationIdMiddleware)

# Root endpoint
@app.get("/")
async def root():
    """API root endpoint with basic information."""
    return {
        "message": "Bookstore API is running!",
        "version": "1.0.0",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
        "api_v1_str": settings.API_V1_STR,
        "endpoints": {
            "books": f"{settings.API_V1_STR}/books",
            "discounted_price": f"{settings.API_V1_STR}/books/discounted-price",
        },
    }

register_exception_handlers(app)

# Mount routers
api = APIRouter(prefix=settings.API_V1_STR)
api.include_router(books_router)
app.include_router(api)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)
