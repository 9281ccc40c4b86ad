# furniture_bom/engine/substitution.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from furniture_bom.db.enums import GENERIC_MODEL
from furniture_bom.engine.records import CatalogSnapshot, Component, GlobalSettings

logger = logging.getLogger(__name__)

# 外观类配件：物理角色固定，外观（model / finish）可随全局设置替换
AESTHETIC_CATEGORIES = frozenset({
    "door",
    "front-panel",
    "trim-strip",
    "kick-plate",
    "side-panel",
    "accessory",
})


def is_substitution_eligible(component: Component) -> bool:
    """Aesthetic category, or tagged with a non-generic model."""
    if (component.category or "").lower() in AESTHETIC_CATEGORIES:
        return True
    return bool(component.model) and component.model != GENERIC_MODEL


@dataclass(frozen=True)
class ResolvedEntry:
    component: Component
    quantity: int
    original: Optional[Component] = None


class SubstitutionResolver:
    """
    Swap aesthetic components for the catalog variant matching the global
    model / finish, keeping category, dimensions and hand.

    Selection is "first match in catalog enumeration order". Two variants
    sharing a substitution key and the same model / finish are a catalog
    data-integrity problem, the resolver does not rank them.
    """

    def __init__(self, snapshot: CatalogSnapshot):
        self.snapshot = snapshot
        # key -> candidates, catalog order preserved
        self._variants: Dict[Tuple[Any, ...], List[Component]] = {}
        for c in snapshot.components:
            self._variants.setdefault(c.substitution_key, []).append(c)

    def resolve(self, component: Component, settings: GlobalSettings) -> Component:
        '''
        Return the component to report for the given appearance settings.

        :param component: component as referenced by the recipe
        :type component: Component
        :param settings: global model / finish
        :type settings: GlobalSettings
        :return: the matching variant, or the original when not eligible,
            already matching, or no variant exists
        :rtype: Component
        '''
        if not settings.model or not settings.finish:
            return component
        if not is_substitution_eligible(component):
            return component
        if component.model == settings.model and component.finish == settings.finish:
            return component

        for candidate in self._variants.get(component.substitution_key, []):
            if candidate.model == settings.model and candidate.finish == settings.finish:
                return candidate

        logger.debug(
            f"no {settings.model}/{settings.finish} variant for {component.sku}, keeping original"
        )
        return component

    def resolve_all(
        self,
        aggregated: Mapping[str, int],
        settings: GlobalSettings,
    ) -> List[ResolvedEntry]:
        '''
        Resolve every aggregated component. Ids missing from the snapshot are
        dropped (dangling recipe references).

        :param aggregated: component_id -> quantity
        :param settings: global model / finish
        :return: one entry per known component, aggregation order kept
        :rtype: List[ResolvedEntry]
        '''
        entries: List[ResolvedEntry] = []
        for component_id, quantity in aggregated.items():
            original = self.snapshot.get_component(component_id)
            if original is None:
                logger.warning(f"recipe references unknown component {component_id}, skipped")
                continue

            chosen = self.resolve(original, settings)
            if chosen.id == original.id:
                entries.append(ResolvedEntry(component=original, quantity=quantity))
            else:
                logger.info(f"substituted {original.sku} -> {chosen.sku}")
                entries.append(ResolvedEntry(component=chosen, quantity=quantity, original=original))
        return entries
