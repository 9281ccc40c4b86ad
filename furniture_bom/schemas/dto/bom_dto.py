from typing import List, Optional

from pydantic import BaseModel

from furniture_bom.engine.pricing import BomLine, BomResult


class BomComponentDTO(BaseModel):
    id: str
    sku: str
    name: str
    unit_price: float


class BomLineDTO(BaseModel):
    component: BomComponentDTO
    quantity: int
    line_total: float
    original_component: Optional[BomComponentDTO] = None

    @classmethod
    def from_domain_model(cls, line: BomLine) -> "BomLineDTO":
        def to_component(c) -> BomComponentDTO:
            return BomComponentDTO(id=c.id, sku=c.sku, name=c.name, unit_price=c.unit_price)

        return cls(
            component=to_component(line.component),
            quantity=line.quantity,
            line_total=line.line_total,
            original_component=to_component(line.original_component) if line.original_component else None,
        )


class BomResultDTO(BaseModel):
    lines: List[BomLineDTO]
    total: float

    @classmethod
    def from_domain_model(cls, result: BomResult) -> "BomResultDTO":
        return cls(
            lines=[BomLineDTO.from_domain_model(l) for l in result.lines],
            total=result.total,
        )
