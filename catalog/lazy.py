from typing import Iterable, Iterator, Tuple

from .domain import Category, Page, Product
from .tree import children_index, root_categories


## лениво обходит дерево категорий в глубину от корней, отдаёт (категория, глубина)
## для отрисовки дерева с отступами; уже посещённые id не раскрываются
def iter_tree(cats: Tuple[Category, ...]) -> Iterator[Tuple[Category, int]]:
    index = children_index(cats)
    visited = set()
    stack = [(root, 0) for root in reversed(root_categories(cats))]

    while stack:
        cat, depth = stack.pop()
        if cat.id in visited:
            continue
        visited.add(cat.id)
        yield (cat, depth)
        for child in reversed(index.get(cat.id, ())):
            stack.append((child, depth + 1))


## лениво режет список товаров на страницы
def iter_pages(products: Iterable[Product], page_size: int) -> Iterator[Page]:
    items = tuple(products)
    total = len(items)
    for number, start in enumerate(range(0, total, page_size), start=1):
        yield Page(
            items=items[start : start + page_size],
            page=number,
            page_size=page_size,
            total=total,
        )
