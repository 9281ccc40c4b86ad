# furniture_bom/engine/basket_aggregator.py
import logging
from typing import Dict, Mapping

from furniture_bom.engine.recipe_index import RecipeIndex

logger = logging.getLogger(__name__)


def explode_basket(basket: Mapping[str, int], index: RecipeIndex) -> Dict[str, int]:
    '''
    Explode basket module quantities into a component -> quantity multiset.

    Rules:
    - every recipe line contributes line_qty * module_qty
    - modules without recipe lines contribute nothing (not an error)
    - the totals do not depend on basket iteration order

    :param basket: module_id -> positive quantity
    :type basket: Mapping[str, int]
    :param index: recipe lookup built from the snapshot
    :type index: RecipeIndex
    :return: component_id -> total quantity, in first-seen order
    :rtype: Dict[str, int]
    '''
    totals: Dict[str, int] = {}
    for module_id, module_qty in basket.items():
        lines = index.lines_for(module_id)
        if not lines:
            logger.debug(f"module {module_id} has no recipe lines, skipped")
            continue
        for component_id, line_qty in lines:
            totals[component_id] = totals.get(component_id, 0) + line_qty * module_qty
    return totals
