from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import Annotated, ClassVar


def _clean_text(field: str, v: object) -> object:
    if v is None:
        raise ValueError(f"{field} cannot be null")
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError(f"{field} cannot be empty")
    return v


# inf/nan would be stored as a non-numeric price
Price = Annotated[float, Field(allow_inf_nan=False)]


def _positive_price(v: float | None) -> float | None:
    if v is not None and v <= 0:
        raise ValueError("price must be > 0")
    return v


# Book base schema
class BookBase(BaseModel):
    title: str
    author: str
    genre: str
    price: Price

    @field_validator("title", "author", "genre", mode="before")
    @classmethod
    def trim_and_check(cls, v: object, info: ValidationInfo) -> object:
        return _clean_text(info.field_name or "value", v)

    @field_validator("price")
    @classmethod
    def positive(cls, v: float) -> float:
        return _positive_price(v)

# Book create schema
class BookCreate(BookBase):
    pass

# Book update schema, only fields sent by the client are applied
class BookUpdate(BaseModel):
    title: str | None = None
    author: str | None = None
    genre: str | None = None
    price: Price | None = None

    @field_validator("title", "author", "genre", "price", mode="before")
    @classmethod
    def not_null(cls, v: object, info: ValidationInfo) -> object:
        return _clean_text(info.field_name or "value", v)

    @field_validator("price")
    @classmethod
    def positive(cls, v: float | None) -> float | None:
        return _positive_price(v)

# Book read schema
class BookRead(BookBase):
    id: int

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)


class BookFilters(BaseModel):
    """
    Optional list filters, combined with AND.
    - genre: exact match, case-insensitive
    - author / title: substring match, case-insensitive
    - min_price / max_price: inclusive bounds
    """
    genre: str | None = None
    author: str | None = None
    title: str | None = None
    min_price: float | None = None
    max_price: float | None = None


class DiscountResult(BaseModel):
    genre: str
    discount_percentage: float
    total_discounted_price: float
