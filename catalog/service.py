import logging
from typing import Dict, FrozenSet, Optional, Tuple

from catalog.config import Settings
from catalog.domain import Category, FilterQuery, Page, Product
from catalog.lazy import iter_tree
from catalog.matching import filter_by_category
from catalog.transforms import apply_filters, load_catalog, paginate
from catalog.tree import child_categories, find_category, has_children, resolve_selection

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Фасад витрины над снимком категорий и товаров.
    Разрешённые выборки кэшируются по (версия снимка, имя категории),
    любая замена снимка сбрасывает кэш.
    """

    def __init__(
        self,
        categories: Tuple[Category, ...],
        products: Tuple[Product, ...],
        max_depth: Optional[int] = None,
    ):
        self.categories = tuple(categories)
        self.products = tuple(products)
        self.max_depth = max_depth
        self.version = 0
        self._resolved: Dict[Tuple[int, str], FrozenSet[str]] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "CatalogService":
        """Загружает снимок из settings.catalog_file"""
        categories, products = load_catalog(settings.catalog_file)
        return cls(categories, products, max_depth=settings.max_tree_depth)

    def replace_snapshot(
        self,
        categories: Optional[Tuple[Category, ...]] = None,
        products: Optional[Tuple[Product, ...]] = None,
    ) -> None:
        """Новый снимок после свежей загрузки; кэш выборок сбрасывается"""
        if categories is not None:
            self.categories = tuple(categories)
        if products is not None:
            self.products = tuple(products)
        self.version += 1
        self._resolved.clear()
        logger.info("Catalog snapshot replaced, version %d", self.version)

    def resolve(self, selected_name: str) -> FrozenSet[str]:
        """
        id выбранной категории и всех её потомков (с кэшем).
        Кэшируются только имена реальных категорий, поэтому кэш не больше
        числа категорий в снимке.
        """
        key = (self.version, selected_name)
        if key in self._resolved:
            return self._resolved[key]
        resolved = resolve_selection(self.categories, selected_name, self.max_depth)
        if resolved:
            self._resolved[key] = resolved
        return resolved

    def products_by_category(
        self, selected_name: str, include_descendants: bool = True
    ) -> Tuple[Product, ...]:
        """Товары категории (и её подкатегорий, если include_descendants)"""
        return filter_by_category(
            self.products,
            self.categories,
            selected_name,
            include_descendants=include_descendants,
            max_depth=self.max_depth,
            allowed_ids=self._allowed(selected_name, include_descendants),
        )

    def browse(self, query: FilterQuery, clamp_page: bool = False) -> Page:
        """
        Одна страница витрины по FilterQuery.
        clamp_page: номер за последней страницей заменяется последней,
        чтобы после сужения фильтров не остаться на пустой странице.
        """
        filtered = apply_filters(
            self.products,
            self.categories,
            query,
            max_depth=self.max_depth,
            allowed_ids=self._allowed(query.category, query.include_descendants),
        )
        page = paginate(filtered, query.page, query.page_size)
        if clamp_page and page.is_past_end:
            page = paginate(filtered, page.last_page, query.page_size)
        return page

    def category_tree(self) -> Tuple[Tuple[Category, int], ...]:
        """Дерево категорий для сайдбара: (категория, глубина)"""
        return tuple(iter_tree(self.categories))

    def subcategories(self, selected_name: str) -> Tuple[Category, ...]:
        """Прямые подкатегории выбранной категории"""
        return (
            find_category(self.categories, selected_name)
            .map(lambda cat: child_categories(self.categories, cat.id))
            .get_or_else(())
        )

    def has_subcategories(self, category_id: str) -> bool:
        return has_children(self.categories, category_id)

    def category_counts(self) -> Dict[str, int]:
        """Число товаров в каждой категории вместе с подкатегориями"""
        return {
            cat.id: len(self.products_by_category(cat.name))
            for cat in self.categories
            if cat.name is not None
        }

    def _allowed(
        self, selected_name: str, include_descendants: bool
    ) -> Optional[FrozenSet[str]]:
        if not selected_name or not include_descendants:
            return None
        return self.resolve(selected_name)
