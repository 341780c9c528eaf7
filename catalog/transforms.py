import json
import logging
from typing import Any, Callable, Optional, Tuple

from .compose import pipe
from .domain import (
    ByName,
    ByPartial,
    ByRef,
    Category,
    CategoryRef,
    FilterQuery,
    NoCategory,
    Page,
    Product,
    SortKey,
)
from .exceptions import CatalogLoadError
from .ftypes import Either
from .matching import filter_by_category

logger = logging.getLogger(__name__)


# ============ Разбор сырых записей ============


def _ref_id(value: Any) -> Optional[str]:
    """id из строки или из объекта с _id/id (populate в Mongo)"""
    if isinstance(value, dict):
        value = value.get("_id", value.get("id"))
    if value is None or value == "":
        return None
    return str(value)


def _parent_of(raw: dict) -> Any:
    """Первый непустой из parent / parentId / parent_id"""
    return next(
        (raw[k] for k in ("parent", "parentId", "parent_id") if raw.get(k) is not None),
        None,
    )


def parse_category(raw: dict) -> Either[str, Category]:
    """Сырая запись категории -> Either[причина, Category]"""
    if not isinstance(raw, dict):
        return Either.left(f"category record is not an object: {raw!r}")

    cat_id = _ref_id(raw.get("_id", raw.get("id")))
    if cat_id is None:
        return Either.left(f"category without id: {raw!r}")

    name = raw.get("name") or raw.get("title")
    return Either.right(
        Category(
            id=cat_id,
            name=str(name) if name else None,
            parent_id=_ref_id(_parent_of(raw)),
        )
    )


def parse_category_ref(raw: Any) -> CategoryRef:
    """Поле category товара -> одна из форм CategoryRef"""
    if isinstance(raw, str):
        return ByName(raw) if raw else NoCategory()
    if isinstance(raw, dict):
        ref_id = _ref_id(raw)
        name = raw.get("name") or raw.get("title")
        if ref_id is not None:
            return ByRef(
                id=ref_id,
                name=str(name) if name else None,
                parent_id=_ref_id(_parent_of(raw)),
            )
        if name:
            return ByPartial(str(name))
    return NoCategory()


def _number(value: Any, default: float = 0) -> float:
    try:
        return float(value) if value is not None else default
    except (TypeError, ValueError):
        return default


def parse_product(raw: dict) -> Either[str, Product]:
    """Сырая запись товара -> Either[причина, Product]"""
    if not isinstance(raw, dict):
        return Either.left(f"product record is not an object: {raw!r}")

    product_id = _ref_id(raw.get("_id", raw.get("id")))
    if product_id is None:
        return Either.left(f"product without id: {raw!r}")

    discount = raw.get("discountPrice", raw.get("discount_price"))
    return Either.right(
        Product(
            id=product_id,
            name=str(raw.get("name") or ""),
            category=parse_category_ref(raw.get("category")),
            original_price=_number(raw.get("originalPrice", raw.get("original_price"))),
            discount_price=_number(discount) if discount is not None else None,
            description=str(raw.get("description") or ""),
            ratings=_number(raw.get("ratings")),
        )
    )


def _parse_all(records, parser, kind: str) -> tuple:
    parsed = tuple(map(parser, records))
    for bad in filter(lambda r: r.is_left, parsed):
        logger.warning("Skipping %s record: %s", kind, bad.value)
    return tuple(r.value for r in parsed if r.is_right)


def parse_catalog(data: dict) -> Tuple[Tuple[Category, ...], Tuple[Product, ...]]:
    """{"categories": [...], "products": [...]} -> иммутабельные кортежи"""
    categories = _parse_all(data.get("categories", []), parse_category, "category")
    products = _parse_all(data.get("products", []), parse_product, "product")
    return categories, products


def load_catalog(path: str) -> Tuple[Tuple[Category, ...], Tuple[Product, ...]]:
    """Загружает JSON-снимок каталога"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CatalogLoadError(
            f"Catalog file not found: {path}", "CATALOG_NOT_FOUND", {"path": str(path)}
        ) from e
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogLoadError(
            f"Catalog file is not readable JSON: {path}", details={"reason": str(e)}
        ) from e

    if not isinstance(data, dict):
        raise CatalogLoadError(
            "Catalog snapshot must be a JSON object", details={"path": str(path)}
        )

    categories, products = parse_catalog(data)
    logger.info(
        "Loaded %d categories and %d products from %s",
        len(categories),
        len(products),
        path,
    )
    return categories, products


# ============ Замыкания-фильтры ============


def by_search(term: str) -> Callable[[Product], bool]:
    """Подстрока в названии или описании без учёта регистра"""
    needle = term.lower()
    return lambda p: needle in p.name.lower() or needle in p.description.lower()


def by_price_range(
    min_price: Optional[float], max_price: Optional[float]
) -> Callable[[Product], bool]:
    """Фильтр по диапазону цен, границы включительно; None: без границы"""
    return lambda p: (min_price is None or p.price >= min_price) and (
        max_price is None or p.price <= max_price
    )


_SORTS = {
    SortKey.PRICE_LOW: (lambda p: p.price, False),
    SortKey.PRICE_HIGH: (lambda p: p.price, True),
    SortKey.NAME: (lambda p: p.name.casefold(), False),
    SortKey.RATING: (lambda p: p.ratings or 0, True),
}


def sort_products(products: Tuple[Product, ...], key: SortKey) -> Tuple[Product, ...]:
    """Стабильная сортировка; DEFAULT сохраняет исходный порядок"""
    if key not in _SORTS:
        return tuple(products)
    sort_key, reverse = _SORTS[key]
    return tuple(sorted(products, key=sort_key, reverse=reverse))


def paginate(products: Tuple[Product, ...], page: int, page_size: int) -> Page:
    """Страница с номером page (с 1); за последней: пустые items"""
    start = (page - 1) * page_size
    return Page(
        items=tuple(products[start : start + page_size]),
        page=page,
        page_size=page_size,
        total=len(products),
    )


# ============ Пайплайн витрины ============


def apply_filters(
    products: Tuple[Product, ...],
    categories: Tuple[Category, ...],
    query: FilterQuery,
    max_depth: Optional[int] = None,
    allowed_ids=None,
) -> Tuple[Product, ...]:
    """
    Категория -> поиск -> цена -> сортировка, одной чистой функцией.
    Каждый шаг независим, порядок фильтров на результат не влияет.
    """
    steps = [
        lambda ps: filter_by_category(
            ps,
            categories,
            query.category,
            include_descendants=query.include_descendants,
            max_depth=max_depth,
            allowed_ids=allowed_ids,
        )
    ]
    if query.search:
        steps.append(lambda ps: tuple(filter(by_search(query.search), ps)))
    if query.min_price is not None or query.max_price is not None:
        steps.append(
            lambda ps: tuple(filter(by_price_range(query.min_price, query.max_price), ps))
        )
    steps.append(lambda ps: sort_products(ps, query.sort))

    return pipe(*steps)(tuple(products))


def browse(
    products: Tuple[Product, ...],
    categories: Tuple[Category, ...],
    query: FilterQuery,
    max_depth: Optional[int] = None,
) -> Page:
    """apply_filters + paginate"""
    filtered = apply_filters(products, categories, query, max_depth)
    return paginate(filtered, query.page, query.page_size)
