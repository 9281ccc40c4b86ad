# furniture_bom/services/csv_ingest_service.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from uuid import uuid4

import pandas as pd

from furniture_bom.db.enums import (
    DEFAULT_CATEGORY,
    GENERIC_MODEL,
    STANDARD_FINISH,
    Hand,
    ModuleCategory,
)
from furniture_bom.engine.records import CatalogSnapshot
from furniture_bom.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

ITEM_COLUMNS = ["id", "sku_obramat", "name", "category", "price_cost"]
RECIPE_COLUMNS = ["module_id", "component_id"]


@dataclass
class ImportReport:
    components_created: int = 0
    modules_created: int = 0
    recipe_lines_created: int = 0
    recipe_lines_skipped: int = 0


def detect_hand(name: Optional[str]) -> Hand:
    '''
    根据名称推断左右手（Izquierda / Derecha）
    '''
    name_lower = (name or "").lower()
    if "izquierda" in name_lower or "izq" in name_lower:
        return Hand.LEFT
    if "derecha" in name_lower or "dcha" in name_lower:
        return Hand.RIGHT
    return Hand.NONE


def placeholder_module_name(module_id: str) -> str:
    return f"Module {module_id[:8]}..."


class CsvIngestService:
    """
    Parse catalog CSV exports (components + module recipes).

    Responsibility:
    - Read CSV with pandas
    - Check column structure
    - Coerce loose rows into component / recipe dicts
    - Synthesise modules known only from recipes (category Imported)
    - Either build a CatalogSnapshot directly or persist through CatalogService
    """

    def __init__(self, catalog_service: Optional[CatalogService] = None):
        self.catalog_service = catalog_service

    def load_snapshot(self, items_path: str, recipes_path: str) -> CatalogSnapshot:
        '''
        File-based catalog provider.

        :param items_path: component CSV path
        :param recipes_path: module recipe CSV path
        :return: validated snapshot
        :raises ValueError: if a file cannot be read or lacks required columns
        '''
        components = self.parse_components(self._load_csv(items_path, ITEM_COLUMNS))
        recipes = self.parse_recipes(self._load_csv(recipes_path, RECIPE_COLUMNS))
        modules = self._synthesise_modules(recipes, known_ids=set())

        return CatalogSnapshot.from_rows(
            components=components,
            modules=modules,
            recipes=recipes,
            models=_vocabulary(c["model"] for c in components),
            finishes=_vocabulary(c["finish"] for c in components),
        )

    def import_into_db(self, items_path: str, recipes_path: str) -> ImportReport:
        '''
        把 CSV 导入数据库（不 commit，由调用方负责）
        规则：
        - 已存在的组件 / 模块不重复创建
        - 引用未知组件的配方行跳过并记录 warning
        '''
        if self.catalog_service is None:
            raise RuntimeError("import_into_db requires a CatalogService")

        components = self.parse_components(self._load_csv(items_path, ITEM_COLUMNS))
        recipes = self.parse_recipes(self._load_csv(recipes_path, RECIPE_COLUMNS))
        report = ImportReport()

        # 1️⃣ 组件
        for c in components:
            if self.catalog_service.get_component(c["id"]) is not None:
                continue
            self.catalog_service.create_component(
                component_id=c["id"],
                sku=c["sku"],
                name=c["name"],
                category=c["category"],
                price=c["unit_price"],
                width=c["width"],
                height=c["height"],
                depth=c["depth"],
                brand=c["brand"],
                model=c["model"],
                finish=c["finish"],
                hand=c["hand"],
            )
            report.components_created += 1

        # 2️⃣ 模块（由配方推断）
        existing = {
            r["module_id"] for r in recipes
            if self.catalog_service.get_module(r["module_id"]) is not None
        }
        for m in self._synthesise_modules(recipes, known_ids=existing):
            self.catalog_service.create_module(
                module_id=m["id"], name=m["name"], category=m["category"]
            )
            report.modules_created += 1

        # 3️⃣ 配方行
        for r in recipes:
            if self.catalog_service.get_component(r["component_id"]) is None:
                logger.warning(
                    f"Skipping recipe line: component {r['component_id']} not found in catalog"
                )
                report.recipe_lines_skipped += 1
                continue
            self.catalog_service.add_recipe_line(
                module_id=r["module_id"],
                item_id=r["component_id"],
                quantity=r["quantity"],
                line_id=r["id"],
            )
            report.recipe_lines_created += 1

        logger.info(
            f"[import] components={report.components_created} modules={report.modules_created} "
            f"recipes={report.recipe_lines_created} skipped={report.recipe_lines_skipped}"
        )
        return report

    def parse_components(self, df: pd.DataFrame) -> List[Dict[str, Any]]:
        '''
        解析组件 CSV，缺少 id 或 sku_obramat 的行跳过
        '''
        components: List[Dict[str, Any]] = []
        for _, row in df.iterrows():
            component_id = _text(row.get("id"))
            sku = _text(row.get("sku_obramat"))
            if not component_id or not sku:
                logger.warning(f"Skipping component row without id/sku: {row.to_dict()}")
                continue
            name = _text(row.get("name")) or ""
            components.append({
                "id": component_id,
                "sku": sku,
                "name": name,
                "category": _text(row.get("category")) or DEFAULT_CATEGORY,
                "unit_price": _number(row.get("price_cost")),
                "width": _number(row.get("dimensions_width")),
                "height": _number(row.get("dimensions_height")),
                "depth": _number(row.get("dimensions_depth")),
                "brand": _text(row.get("brand")),
                "model": _text(row.get("model_series")) or GENERIC_MODEL,
                "finish": _text(row.get("finish_color")) or STANDARD_FINISH,
                "hand": detect_hand(name),
            })
        logger.info(f"[components] df rows={len(df)} parsed={len(components)}")
        return components

    def parse_recipes(self, df: pd.DataFrame) -> List[Dict[str, Any]]:
        '''
        解析配方 CSV，缺少 module_id 或 component_id 的行跳过；数量默认 1，非整数或 < 1 的行跳过
        '''
        recipes: List[Dict[str, Any]] = []
        for _, row in df.iterrows():
            module_id = _text(row.get("module_id"))
            component_id = _text(row.get("component_id"))
            if not module_id or not component_id:
                continue
            raw_qty = _text(row.get("quantity"))
            quantity = _quantity(raw_qty) if raw_qty else 1
            if quantity is None or quantity < 1:
                logger.warning(f"Skipping recipe line with quantity {raw_qty!r}: {module_id} -> {component_id}")
                continue
            recipes.append({
                "id": _text(row.get("id")) or str(uuid4()),
                "module_id": module_id,
                "component_id": component_id,
                "quantity": quantity,
            })
        logger.info(f"[recipes] df rows={len(df)} parsed={len(recipes)}")
        return recipes

    def _synthesise_modules(self, recipes: List[Dict[str, Any]], known_ids: set) -> List[Dict[str, Any]]:
        modules: Dict[str, Dict[str, Any]] = {}
        for r in recipes:
            module_id = r["module_id"]
            if module_id in known_ids or module_id in modules:
                continue
            modules[module_id] = {
                "id": module_id,
                "name": placeholder_module_name(module_id),
                "category": ModuleCategory.IMPORTED.value,
            }
        return list(modules.values())

    def _load_csv(self, path: str, required: List[str]) -> pd.DataFrame:
        """
        Load CSV as strings and check required columns.
        """
        try:
            df = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
        except Exception as e:
            raise ValueError(f"Failed to read CSV {path}: {e}")

        missing = [c for c in required if c not in df.columns]
        if missing:
            raise ValueError(f"Missing required columns: {missing}")
        return df


def _text(value) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    text = str(value).strip()
    return text or None


def _number(value) -> float:
    # 与导出表保持一致：空值按 0 处理
    text = _text(value)
    if text is None:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


def _quantity(text: str) -> Optional[int]:
    # 只接受整数（"2" 或 "2.0"），其余返回 None
    try:
        value = float(text)
    except ValueError:
        return None
    if not value.is_integer():
        return None
    return int(value)


def _vocabulary(values) -> List[str]:
    seen: Dict[str, None] = {}
    for v in values:
        if v:
            seen.setdefault(v, None)
    return list(seen)
