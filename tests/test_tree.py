import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import logging
from catalog.domain import Category
from catalog.tree import (
    children_index,
    find_category,
    resolve_selection,
    descendant_ids,
    root_categories,
    child_categories,
    has_children,
)

cats = (
    Category(id="1", name="Electronics"),
    Category(id="2", name="Phones", parent_id="1"),
    Category(id="3", name="Smartphones", parent_id="2"),
    Category(id="4", name="Laptops", parent_id="1"),
    Category(id="5", name="Furniture"),
)


def chain(length):
    """root -> n1 -> ... -> n{length}"""
    return (Category(id="root", name="Root"),) + tuple(
        Category(id=f"n{i}", name=f"Level {i}", parent_id="root" if i == 1 else f"n{i - 1}")
        for i in range(1, length + 1)
    )


def test_children_index_groups_by_parent():
    index = children_index(cats)
    assert {c.id for c in index["1"]} == {"2", "4"}
    assert {c.id for c in index[None]} == {"1", "5"}
    assert "3" not in index


def test_find_category_by_name():
    assert find_category(cats, "Phones").get_or_else(None).id == "2"
    assert find_category(cats, "Nope").is_none()
    assert find_category(cats, "").is_none()


def test_find_category_skips_records_without_name():
    broken = (Category(id="x", name=None), Category(id="y", name="Toys"))
    assert find_category(broken, "Toys").get_or_else(None).id == "y"


def test_resolve_selection_root_and_child():
    assert resolve_selection(cats, "Electronics") == {"1", "2", "3", "4"}
    assert resolve_selection(cats, "Phones") == {"2", "3"}
    assert resolve_selection(cats, "Smartphones") == {"3"}


def test_resolve_selection_unknown_is_empty():
    assert resolve_selection(cats, "Nonexistent") == frozenset()


def test_resolve_selection_parent_is_superset_of_children():
    for parent in cats:
        parent_ids = resolve_selection(cats, parent.name)
        for child in child_categories(cats, parent.id):
            assert resolve_selection(cats, child.name) <= parent_ids


def test_resolve_selection_depth_independent():
    for length in (1, 2, 5):
        resolved = resolve_selection(chain(length), "Root")
        assert f"n{length}" in resolved
        assert len(resolved) == length + 1


def test_nameless_descendant_still_resolved():
    data = cats + (Category(id="6", name=None, parent_id="3"),)
    assert "6" in resolve_selection(data, "Phones")


def test_cycle_does_not_hang(caplog):
    cyclic = (
        Category(id="a", name="A", parent_id="b"),
        Category(id="b", name="B", parent_id="a"),
    )
    with caplog.at_level(logging.WARNING, logger="catalog.tree"):
        assert resolve_selection(cyclic, "A") == {"a", "b"}
    assert "cycle" in caplog.text


def test_self_parent_does_not_hang():
    looped = (Category(id="a", name="A", parent_id="a"),)
    assert resolve_selection(looped, "A") == {"a"}


def test_max_depth_cuts_expansion(caplog):
    with caplog.at_level(logging.WARNING, logger="catalog.tree"):
        resolved = resolve_selection(chain(5), "Root", max_depth=2)
    assert resolved == {"root", "n1", "n2"}
    assert "deeper" in caplog.text


def test_descendant_ids_includes_root():
    assert descendant_ids(cats, "2") == {"2", "3"}


def test_root_and_children_helpers():
    assert [c.id for c in root_categories(cats)] == ["1", "5"]
    assert [c.id for c in child_categories(cats, "1")] == ["2", "4"]
    assert has_children(cats, "2")
    assert not has_children(cats, "3")

