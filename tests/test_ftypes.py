import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from catalog.ftypes import Maybe, Either


# ТЕСТЫ Maybe
def test_maybe_some_and_none_behavior():
    just = Maybe.some("c1")
    nothing = Maybe.nothing()

    assert just.is_some() and not just.is_none()
    assert nothing.is_none()
    assert just.get_or_else("") == "c1"
    assert nothing.get_or_else("") == ""
    assert Maybe.from_optional(None).is_none()


def test_maybe_map():
    maybe_val = Maybe.some(10)
    assert maybe_val.map(lambda x: x * 2).get_or_else(0) == 20
    assert Maybe.nothing().map(lambda x: x * 2).is_none()


# ТЕСТЫ Either
def test_either_left_and_right_behavior():
    right_val = Either.right(100)
    left_val = Either.left("category without id")

    assert right_val.is_right
    assert left_val.is_left
    assert right_val.get_or_else(0) == 100
    assert left_val.get_or_else(0) == 0


def test_either_map():
    val = Either.right(5)
    assert val.map(lambda x: x * 2).get_or_else(0) == 10
    assert Either.left("bad").map(lambda x: x * 2).is_left
