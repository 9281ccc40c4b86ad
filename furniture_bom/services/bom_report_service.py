# furniture_bom/services/bom_report_service.py
import io
import logging
from typing import Mapping

import pandas as pd

from furniture_bom.engine.bom import compute_bom
from furniture_bom.engine.pricing import BomResult
from furniture_bom.engine.records import CatalogSnapshot, GlobalSettings

logger = logging.getLogger(__name__)

REPORT_COLUMNS = ["SKU", "Name", "Quantity", "UnitPrice", "LineTotal", "OriginalSKU"]


class BomReportService:
    """
    Compute the BOM for a basket and render it for the presentation layer.

    This service does NOT persist data.
    """

    def __init__(self, snapshot: CatalogSnapshot):
        self.snapshot = snapshot

    def calculate(self, basket: Mapping[str, int], settings: GlobalSettings) -> BomResult:
        result = compute_bom(self.snapshot, basket, settings)
        logger.info(
            f"[bom] modules={len(basket)} lines={len(result.lines)} total={result.total:.2f}"
        )
        return result

    def to_clipboard_text(self, result: BomResult) -> str:
        return result.to_clipboard_text()

    def generate_df_report(self, result: BomResult) -> pd.DataFrame:
        """
        Human-readable BOM table: one row per line plus a total row.
        """
        rows = []
        for line in result.lines:
            rows.append([
                line.component.sku,
                line.component.name,
                line.quantity,
                line.component.unit_price,
                round(line.line_total, 2),
                line.original_component.sku if line.original_component else "",
            ])
        #合计行
        rows.append(["Total", "", "", "", round(result.total, 2), ""])
        return pd.DataFrame(rows, columns=REPORT_COLUMNS)

    def to_excel_bytes(self, df: pd.DataFrame, sheet_name: str = "BOM") -> io.BytesIO:
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=sheet_name)
        output.seek(0)
        return output
