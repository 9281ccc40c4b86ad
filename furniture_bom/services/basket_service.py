# furniture_bom/services/basket_service.py
"""
Basket edits. Every function returns a new dict; a basket never stores a
zero or negative quantity.
"""
from typing import Any, Dict, Mapping


def normalize_basket(raw: Mapping[Any, Any]) -> Dict[str, int]:
    '''
    Coerce a loosely-typed basket (session / JSON payload) into module_id -> int,
    dropping non-positive entries.

    :param raw: mapping of module id to quantity-like values
    :raises ValueError: if a quantity is not an integer
    '''
    basket: Dict[str, int] = {}
    for module_id, qty in (raw or {}).items():
        try:
            quantity = int(qty)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid quantity for module {module_id}: {qty!r}")
        if quantity > 0:
            basket[str(module_id)] = quantity
    return basket


def add_to_basket(basket: Mapping[str, int], module_id: str, quantity: int = 1) -> Dict[str, int]:
    """Accumulate quantity onto the module's current count."""
    new_basket = dict(basket)
    new_qty = new_basket.get(module_id, 0) + quantity
    if new_qty <= 0:
        new_basket.pop(module_id, None)
    else:
        new_basket[module_id] = new_qty
    return new_basket


def update_basket(basket: Mapping[str, int], module_id: str, quantity: int) -> Dict[str, int]:
    """Set the module's count; zero or negative removes it."""
    new_basket = dict(basket)
    if quantity <= 0:
        new_basket.pop(module_id, None)
    else:
        new_basket[module_id] = quantity
    return new_basket


def remove_from_basket(basket: Mapping[str, int], module_id: str) -> Dict[str, int]:
    new_basket = dict(basket)
    new_basket.pop(module_id, None)
    return new_basket
