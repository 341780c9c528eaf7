"""
Отбор товаров по выбранной категории.

В базе у товара категория хранится в разных формах (строка, объект с id,
объект только с именем), поэтому проверка идёт по правилам, первое
сработавшее побеждает. Каждое правило точное, нечёткого сравнения нет.
"""

import logging
from typing import Callable, Dict, FrozenSet, Optional, Tuple

from .domain import ByName, ByPartial, ByRef, Category, Product
from .tree import find_category, resolve_selection

logger = logging.getLogger(__name__)


def _first_id_by_name(cats: Tuple[Category, ...]) -> Dict[str, str]:
    """имя -> id первой категории с этим именем (как find_category)"""
    index: Dict[str, str] = {}
    for cat in cats:
        if cat.name is not None and cat.name not in index:
            index[cat.name] = cat.id
    return index


def category_matcher(
    cats: Tuple[Category, ...],
    allowed_ids: FrozenSet[str],
    selected_name: str,
) -> Callable[[Product], bool]:
    """Предикат: товар входит в выбранную категорию или её подкатегории"""
    id_by_name = _first_id_by_name(cats)

    def matches(product: Product) -> bool:
        ref = product.category
        if isinstance(ref, ByName):
            # строка совпала напрямую или называет подкатегорию выбранной
            return ref.name == selected_name or id_by_name.get(ref.name) in allowed_ids
        if isinstance(ref, ByRef):
            return (
                ref.id in allowed_ids
                or (ref.name is not None and ref.name == selected_name)
                or (ref.parent_id is not None and ref.parent_id in allowed_ids)
            )
        if isinstance(ref, ByPartial):
            return ref.name == selected_name
        return False

    return matches


def exact_category_matcher(
    cats: Tuple[Category, ...], selected_name: str
) -> Callable[[Product], bool]:
    """Только сама категория, без потомков (выбор конкретной подкатегории)"""
    selected_id = find_category(cats, selected_name).map(lambda c: c.id).get_or_else(None)

    def matches(product: Product) -> bool:
        ref = product.category
        if isinstance(ref, (ByName, ByPartial)):
            return ref.name == selected_name
        if isinstance(ref, ByRef):
            return (selected_id is not None and ref.id == selected_id) or (
                ref.name is not None and ref.name == selected_name
            )
        return False

    return matches


def filter_by_category(
    products: Tuple[Product, ...],
    cats: Tuple[Category, ...],
    selected_name: str,
    include_descendants: bool = True,
    max_depth: Optional[int] = None,
    allowed_ids: Optional[FrozenSet[str]] = None,
) -> Tuple[Product, ...]:
    """
    Товары выбранной категории в исходном порядке.
    Пустой выбор ("Все категории") возвращает товары без изменений.
    allowed_ids можно передать заранее вычисленным (кэш сервиса).
    """
    if not selected_name:
        return tuple(products)

    if include_descendants:
        if allowed_ids is None:
            allowed_ids = resolve_selection(cats, selected_name, max_depth)
        if not allowed_ids:
            return ()
        predicate = category_matcher(cats, allowed_ids, selected_name)
    else:
        if find_category(cats, selected_name).is_none():
            return ()
        predicate = exact_category_matcher(cats, selected_name)

    result = tuple(filter(predicate, products))
    logger.debug(
        "Category %r matched %d of %d products",
        selected_name,
        len(result),
        len(products),
    )
    return result
