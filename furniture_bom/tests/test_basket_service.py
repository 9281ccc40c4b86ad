import pytest

from furniture_bom.services.basket_service import (
    add_to_basket,
    normalize_basket,
    remove_from_basket,
    update_basket,
)


def test_add_accumulates():
    basket = add_to_basket({}, "m1")
    basket = add_to_basket(basket, "m1", 2)

    assert basket == {"m1": 3}


def test_update_sets_and_removes():
    basket = update_basket({"m1": 3}, "m1", 5)
    assert basket == {"m1": 5}

    assert update_basket(basket, "m1", 0) == {}
    assert update_basket(basket, "m1", -2) == {}


def test_remove():
    assert remove_from_basket({"m1": 1, "m2": 2}, "m1") == {"m2": 2}
    assert remove_from_basket({}, "m1") == {}


def test_edits_return_new_dict():
    basket = {"m1": 1}

    add_to_basket(basket, "m1", 4)
    update_basket(basket, "m1", 0)
    remove_from_basket(basket, "m1")

    assert basket == {"m1": 1}


def test_normalize_coerces_and_drops_non_positive():
    assert normalize_basket({"m1": "2", "m2": 0, "m3": -1, 4: 1}) == {"m1": 2, "4": 1}
    assert normalize_basket(None) == {}


def test_normalize_rejects_non_integer():
    with pytest.raises(ValueError):
        normalize_basket({"m1": "two"})
