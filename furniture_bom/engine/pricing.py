# furniture_bom/engine/pricing.py
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from furniture_bom.engine.records import Component
from furniture_bom.engine.substitution import ResolvedEntry

CLIPBOARD_HEADER = "SKU\tName\tQuantity\tLineTotal"


@dataclass(frozen=True)
class BomLine:
    component: Component
    quantity: int
    line_total: float
    original_component: Optional[Component] = None

    @property
    def substituted(self) -> bool:
        return self.original_component is not None


@dataclass(frozen=True)
class BomResult:
    lines: List[BomLine] = field(default_factory=list)
    total: float = 0.0

    def to_clipboard_text(self) -> str:
        """Tab-separated table for spreadsheet paste."""
        rows = [CLIPBOARD_HEADER]
        for line in self.lines:
            rows.append(
                f"{line.component.sku}\t{line.component.name}\t{line.quantity}\t{line.line_total:.2f}"
            )
        return "\n".join(rows)


def price_lines(entries: Sequence[ResolvedEntry]) -> BomResult:
    '''
    Price resolved entries and sort them by the reported SKU.

    :param entries: resolved (component, quantity) pairs in aggregation order
    :return: lines sorted by sku (stable) and the grand total
    :rtype: BomResult
    '''
    lines = [
        BomLine(
            component=e.component,
            quantity=e.quantity,
            line_total=e.component.unit_price * e.quantity,
            original_component=e.original,
        )
        for e in entries
    ]
    # sorted() 是稳定排序，同 sku 保持聚合顺序
    lines = sorted(lines, key=lambda l: l.component.sku)
    total = sum(l.line_total for l in lines)
    return BomResult(lines=lines, total=total)
