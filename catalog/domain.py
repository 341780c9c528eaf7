from dataclasses import dataclass
from enum import Enum
from math import ceil
from typing import Optional, Tuple, Union

from .exceptions import InvalidQueryError


@dataclass(frozen=True)
class Category:
    id: str
    name: Optional[str]  # None у битых записей: в поиске по имени не участвуют
    parent_id: Optional[str] = None


# Ссылка на категорию в товаре: четыре формы, в которых она встречается в базе


@dataclass(frozen=True)
class ByName:
    """Старый формат: категория сохранена строкой-именем"""

    name: str


@dataclass(frozen=True)
class ByRef:
    """Заполненный объект категории с id (populate)"""

    id: str
    name: Optional[str] = None
    parent_id: Optional[str] = None


@dataclass(frozen=True)
class ByPartial:
    """Объект только с именем, без id"""

    name: str


@dataclass(frozen=True)
class NoCategory:
    """Категория отсутствует или не распознана"""


CategoryRef = Union[ByName, ByRef, ByPartial, NoCategory]


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    category: CategoryRef
    original_price: float = 0
    discount_price: Optional[float] = None
    description: str = ""
    ratings: float = 0

    @property
    def price(self) -> float:
        """Цена со скидкой, если она задана, иначе исходная"""
        return self.discount_price or self.original_price


class SortKey(str, Enum):
    DEFAULT = "default"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    NAME = "name"
    RATING = "rating"


@dataclass(frozen=True)
class FilterQuery:
    """
    Всё состояние витрины одним значением.
    category == "" означает "Все категории".
    """

    category: str = ""
    search: str = ""
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort: SortKey = SortKey.DEFAULT
    include_descendants: bool = True
    page: int = 1
    page_size: int = 12

    def __post_init__(self):
        if self.page < 1:
            raise InvalidQueryError("page must be >= 1", details={"page": self.page})
        if self.page_size < 1:
            raise InvalidQueryError(
                "page_size must be >= 1", details={"page_size": self.page_size}
            )
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise InvalidQueryError(
                "min_price is greater than max_price",
                details={"min_price": self.min_price, "max_price": self.max_price},
            )
        # строки из query-параметров приводим к SortKey
        try:
            object.__setattr__(self, "sort", SortKey(self.sort))
        except ValueError as e:
            raise InvalidQueryError(
                f"unknown sort key: {self.sort!r}", details={"sort": self.sort}
            ) from e


@dataclass(frozen=True)
class Page:
    items: Tuple[Product, ...]
    page: int
    page_size: int
    total: int

    @property
    def pages(self) -> int:
        return ceil(self.total / self.page_size) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def last_page(self) -> int:
        """Номер последней страницы; для пустого результата 1"""
        return max(1, self.pages)

    @property
    def is_past_end(self) -> bool:
        return self.page > self.last_page
