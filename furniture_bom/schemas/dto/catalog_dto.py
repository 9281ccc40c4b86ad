from typing import List, Optional

from furniture_bom.models.cabinet_module import CabinetModule
from furniture_bom.models.component_item import ComponentItem
from furniture_bom.schemas.dto.base_dto import BaseDTO


class ComponentDTO(BaseDTO):
    id: str
    sku: str
    name: str
    category: str
    price: float
    width: Optional[float] = None
    height: Optional[float] = None
    depth: Optional[float] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    finish: Optional[str] = None
    hand: Optional[str] = None

    @classmethod
    def from_orm_model(cls, item: ComponentItem) -> "ComponentDTO":
        return cls(
            id=item.id,
            sku=item.sku,
            name=item.name,
            category=item.category,
            price=float(item.price or 0),
            width=item.width,
            height=item.height,
            depth=item.depth,
            brand=item.brand,
            model=item.model,
            finish=item.finish,
            hand=item.hand.value if item.hand else None,
        )


class RecipeLineDTO(BaseDTO):
    component: ComponentDTO
    quantity: int


class ModuleDTO(BaseDTO):
    id: str
    name: str
    category: str
    recipe: Optional[List[RecipeLineDTO]] = None

    @classmethod
    def from_orm_model(cls, module: CabinetModule, recipe=None) -> "ModuleDTO":
        '''
        :param recipe: 可选 [(ComponentItem, quantity)]，由 CatalogService.get_module_recipe 提供
        '''
        return cls(
            id=module.id,
            name=module.name,
            category=module.category,
            recipe=[
                RecipeLineDTO(component=ComponentDTO.from_orm_model(item), quantity=qty)
                for item, qty in recipe
            ] if recipe is not None else None,
        )


class VocabularyDTO(BaseDTO):
    id: str
    name: str

    @classmethod
    def from_orm_model(cls, entry) -> "VocabularyDTO":
        return cls(id=entry.id, name=entry.name)
