# furniture_bom/engine/recipe_index.py
from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from furniture_bom.engine.records import RecipeLine


class RecipeIndex:
    """
    module_id -> ordered [(component_id, quantity)].

    Repeated component ids inside one module are kept as separate entries;
    their quantities add up during explosion.
    """

    def __init__(self, recipes: Iterable[RecipeLine]):
        lines: Dict[str, List[Tuple[str, int]]] = defaultdict(list)
        for r in recipes:
            lines[r.module_id].append((r.component_id, r.quantity))
        self._lines = dict(lines)

    def lines_for(self, module_id: str) -> List[Tuple[str, int]]:
        return self._lines.get(module_id, [])

    def __contains__(self, module_id: str) -> bool:
        return module_id in self._lines

    def __len__(self) -> int:
        return len(self._lines)
