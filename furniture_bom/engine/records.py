# furniture_bom/engine/records.py
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from furniture_bom.db.enums import Hand


class InvalidSnapshotError(ValueError):
    """A catalog snapshot is missing identity / price fields and cannot be priced."""


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Component(_Record):
    id: str = Field(min_length=1)
    sku: str = Field(min_length=1)
    name: str
    category: str
    unit_price: float = Field(ge=0)
    width: Optional[float] = None
    height: Optional[float] = None
    depth: Optional[float] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    finish: Optional[str] = None
    hand: Optional[Hand] = None

    @property
    def substitution_key(self) -> Tuple[Any, ...]:
        # 只有 model / finish 可以不同；未设置 hand 等同于 Hand.NONE
        return (self.category, self.width, self.height, self.depth, self.hand or Hand.NONE)


class Module(_Record):
    id: str = Field(min_length=1)
    name: str
    category: str


class RecipeLine(_Record):
    id: str = Field(min_length=1)
    module_id: str = Field(min_length=1)
    component_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)


class GlobalSettings(_Record):
    """
    Appearance selected for the whole basket.
    A missing model or finish means "nothing selected": no substitution happens.
    """
    model: Optional[str] = None
    finish: Optional[str] = None


@dataclass(frozen=True)
class CatalogSnapshot:
    """
    Immutable view of the catalog for the duration of one computation.

    components keep catalog enumeration order, which decides the
    first-match tie-break of substitution.
    """
    components: Tuple[Component, ...] = ()
    modules: Tuple[Module, ...] = ()
    recipes: Tuple[RecipeLine, ...] = ()
    models: Tuple[str, ...] = ()
    finishes: Tuple[str, ...] = ()
    _by_id: Dict[str, Component] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        by_id: Dict[str, Component] = {}
        for c in self.components:
            # 重复 id 时保留第一条
            by_id.setdefault(c.id, c)
        object.__setattr__(self, "_by_id", by_id)

    def get_component(self, component_id: str) -> Optional[Component]:
        return self._by_id.get(component_id)

    @classmethod
    def from_rows(
        cls,
        *,
        components: Iterable[Dict[str, Any]] = (),
        modules: Iterable[Dict[str, Any]] = (),
        recipes: Iterable[Dict[str, Any]] = (),
        models: Iterable[str] = (),
        finishes: Iterable[str] = (),
    ) -> "CatalogSnapshot":
        '''
        Validate loosely-typed rows into a strict snapshot.

        :param components: component rows (dict-like)
        :param modules: module rows
        :param recipes: recipe rows
        :param models: model vocabulary
        :param finishes: finish vocabulary
        :raises InvalidSnapshotError: if any row is structurally invalid; the
            whole snapshot is rejected
        '''
        try:
            return cls(
                components=tuple(Component.model_validate(r) for r in components),
                modules=tuple(Module.model_validate(r) for r in modules),
                recipes=tuple(RecipeLine.model_validate(r) for r in recipes),
                models=tuple(models),
                finishes=tuple(finishes),
            )
        except ValidationError as e:
            raise InvalidSnapshotError(f"Invalid catalog snapshot: {e}") from e
