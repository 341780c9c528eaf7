import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from catalog.domain import Category, Product, NoCategory
from catalog.lazy import iter_tree, iter_pages

cats = (
    Category(id="1", name="Electronics"),
    Category(id="2", name="Phones", parent_id="1"),
    Category(id="3", name="Smartphones", parent_id="2"),
    Category(id="4", name="Furniture"),
)

products = tuple(
    Product(id=f"p{i}", name=f"P{i}", category=NoCategory()) for i in range(5)
)


def test_iter_tree_depth_first_with_depths():
    assert [(c.id, d) for c, d in iter_tree(cats)] == [
        ("1", 0),
        ("2", 1),
        ("3", 2),
        ("4", 0),
    ]


def test_iter_tree_is_lazy():
    gen = iter_tree(cats)
    assert hasattr(gen, "__next__")
    assert next(gen)[0].id == "1"


def test_iter_tree_duplicate_id_not_repeated():
    dup = cats + (Category(id="1", name="Electronics copy", parent_id="3"),)
    ids = [c.id for c, _ in iter_tree(dup)]
    assert ids.count("1") == 1


def test_iter_pages_splits_products():
    pages = list(iter_pages(products, 2))
    assert [len(p.items) for p in pages] == [2, 2, 1]
    assert [p.page for p in pages] == [1, 2, 3]
    assert all(p.total == 5 for p in pages)
    assert not pages[-1].has_next


def test_iter_pages_empty():
    assert list(iter_pages((), 10)) == []
