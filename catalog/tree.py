import logging
from collections import defaultdict, deque
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from .domain import Category
from .ftypes import Maybe

logger = logging.getLogger(__name__)

ChildrenIndex = Dict[Optional[str], Tuple[Category, ...]]


def children_index(cats: Iterable[Category]) -> ChildrenIndex:
    """Индекс parent_id -> прямые дети, строится один раз на вызов"""
    index = defaultdict(list)
    for cat in cats:
        index[cat.parent_id].append(cat)
    return {parent: tuple(children) for parent, children in index.items()}


def find_category(cats: Iterable[Category], name: str) -> Maybe[Category]:
    """Первая категория с таким именем; записи без имени пропускаются"""
    if not name:
        return Maybe.nothing()
    return Maybe.from_optional(
        next((c for c in cats if c.name is not None and c.name == name), None)
    )


# Обход в ширину по индексу детей


def _walk(
    index: ChildrenIndex, root_id: str, max_depth: Optional[int] = None
) -> Tuple[Category, ...]:
    """
    Все потомки root_id (без самого root) в порядке обхода в ширину.
    Повторно встреченный id не раскрывается: это цикл или дубль id в данных.
    """
    visited = {root_id}
    found = []
    queue = deque([(root_id, 0)])

    while queue:
        current, depth = queue.popleft()
        children = index.get(current, ())
        if max_depth is not None and depth >= max_depth:
            if children:
                logger.warning(
                    "Category %s is deeper than %d levels, descendants skipped",
                    current,
                    max_depth,
                )
            continue
        for child in children:
            if child.id in visited:
                logger.warning(
                    "Category cycle detected: %s -> %s, branch not expanded",
                    current,
                    child.id,
                )
                continue
            visited.add(child.id)
            found.append(child)
            queue.append((child.id, depth + 1))

    return tuple(found)


def descendant_ids(
    cats: Tuple[Category, ...], root_id: str, max_depth: Optional[int] = None
) -> FrozenSet[str]:
    """root_id и id всех его потомков на любой глубине"""
    walked = _walk(children_index(cats), root_id, max_depth)
    return frozenset((root_id,) + tuple(c.id for c in walked))


def resolve_selection(
    cats: Tuple[Category, ...], selected_name: str, max_depth: Optional[int] = None
) -> FrozenSet[str]:
    """
    Выбранная категория -> множество id, которые считаются этой категорией:
    она сама и все потомки. Неизвестное имя даёт пустое множество.

    Пример:
      Electronics(1) -> Phones(2) -> Smartphones(3)
      resolve_selection(cats, "Electronics") -> {1, 2, 3}
      resolve_selection(cats, "Phones") -> {2, 3}
    """
    found = find_category(cats, selected_name)
    if found.is_none():
        logger.debug("Category %r not found, empty selection", selected_name)
        return frozenset()

    resolved = descendant_ids(cats, found.value.id, max_depth)
    logger.debug("Category %r resolved to %d ids", selected_name, len(resolved))
    return resolved


# Помощники для дерева в сайдбаре


def root_categories(cats: Tuple[Category, ...]) -> Tuple[Category, ...]:
    return tuple(filter(lambda c: not c.parent_id, cats))


def child_categories(cats: Tuple[Category, ...], parent_id: str) -> Tuple[Category, ...]:
    return tuple(filter(lambda c: c.parent_id == parent_id, cats))


def has_children(cats: Tuple[Category, ...], category_id: str) -> bool:
    return any(c.parent_id == category_id for c in cats)
