# furniture_bom/engine/bom.py
from typing import Mapping

from furniture_bom.engine.basket_aggregator import explode_basket
from furniture_bom.engine.pricing import BomResult, price_lines
from furniture_bom.engine.recipe_index import RecipeIndex
from furniture_bom.engine.records import CatalogSnapshot, GlobalSettings
from furniture_bom.engine.substitution import SubstitutionResolver


def compute_bom(
    snapshot: CatalogSnapshot,
    basket: Mapping[str, int],
    settings: GlobalSettings,
) -> BomResult:
    """
    Basket + snapshot + settings -> sorted priced component list and total.

    Pure: recomputed from scratch on every call, nothing is cached. The basket
    must already be normalized (positive quantities only).
    """
    index = RecipeIndex(snapshot.recipes)
    aggregated = explode_basket(basket, index)
    entries = SubstitutionResolver(snapshot).resolve_all(aggregated, settings)
    return price_lines(entries)
