import logging
import random
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence, Tuple
from uuid import uuid4

from sqlalchemy import or_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from furniture_bom.db.enums import DEFAULT_CATEGORY, Hand
from furniture_bom.engine.records import CatalogSnapshot
from furniture_bom.models.cabinet_module import CabinetModule
from furniture_bom.models.catalog_vocabulary import CatalogFinish, CatalogModel
from furniture_bom.models.component_item import ComponentItem
from furniture_bom.models.module_recipe import ModuleRecipe

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 50


class CatalogService:
    """
    Catalog administration over the persistence layer and the database
    catalog provider (load_snapshot).

    Responsibilities:
    - Create / look up components
    - Create / update modules and replace their recipes
    - Maintain model / finish vocabularies
    - Build validated CatalogSnapshot for the BOM engine

    The service only flushes; commit / rollback belongs to the caller.
    """

    def __init__(self, db: Session):
        self.db = db

    # =========
    # Components
    # =========
    def create_component(
        self,
        *,
        name: str,
        price: float,
        sku: Optional[str] = None,
        category: Optional[str] = None,
        component_id: Optional[str] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        depth: Optional[float] = None,
        brand: Optional[str] = None,
        model: Optional[str] = None,
        finish: Optional[str] = None,
        hand: Optional[Hand] = None,
    ) -> ComponentItem:
        '''
        创建新组件
        :param name: 组件名称（必填）
        :type name: str
        :param price: 单价，不能为负
        :type price: float
        :param sku: 为空时自动生成 GEN-0000 ~ GEN-9999
        :type sku: Optional[str]
        :param category: 为空时使用 General
        :type category: Optional[str]
        :param hand: 为空时使用 Hand.NONE
        :return: 创建的组件
        :rtype: ComponentItem
        '''
        if not name or not name.strip():
            raise ValueError("Component name is required")
        if price is None:
            raise ValueError("Component price is required")
        try:
            unit_price = Decimal(str(price))
        except (InvalidOperation, TypeError):
            raise ValueError(f"Component price must be a number: {price!r}")
        if not unit_price.is_finite():
            raise ValueError(f"Component price must be a number: {price!r}")
        if unit_price < 0:
            raise ValueError("Component price must be non-negative")

        item = ComponentItem(
            id=component_id or str(uuid4()),
            sku=(sku or "").strip() or f"GEN-{random.randint(0, 9999):04d}",
            name=name.strip(),
            category=(category or "").strip() or DEFAULT_CATEGORY,
            price=unit_price,
            width=width,
            height=height,
            depth=depth,
            brand=brand,
            model=model,
            finish=finish,
            hand=hand or Hand.NONE,
        )
        self.db.add(item)
        self.db.flush()
        return item

    def get_component(self, component_id: str) -> Optional[ComponentItem]:
        return self.db.get(ComponentItem, component_id)

    def list_components(self) -> List[ComponentItem]:
        return (
            self.db.query(ComponentItem)
            .order_by(ComponentItem.created_at, ComponentItem.id)
            .all()
        )

    def search_components(self, term: str = "", limit: int = SEARCH_LIMIT) -> List[ComponentItem]:
        '''
        按名称（不区分大小写）或 SKU 子串搜索组件，最多返回 limit 条
        '''
        query = self.db.query(ComponentItem)
        term = (term or "").strip()
        if term:
            query = query.filter(
                or_(
                    func.lower(ComponentItem.name).contains(term.lower()),
                    ComponentItem.sku.contains(term),
                )
            )
        return query.order_by(ComponentItem.sku, ComponentItem.id).limit(limit).all()

    # =========
    # Modules & recipes
    # =========
    def create_module(
        self,
        *,
        name: str,
        category: str,
        module_id: Optional[str] = None,
    ) -> CabinetModule:
        if not name or not name.strip():
            raise ValueError("Module name is required")
        module = CabinetModule(
            id=module_id or str(uuid4()),
            name=name.strip(),
            category=category,
        )
        self.db.add(module)
        self.db.flush()
        return module

    def update_module(self, *, module_id: str, name: str, category: Optional[str] = None) -> CabinetModule:
        module = self._load_module(module_id)
        if not name or not name.strip():
            raise ValueError("Module name is required")
        module.name = name.strip()
        if category:
            module.category = category
        self.db.flush()
        return module

    def get_module(self, module_id: str) -> Optional[CabinetModule]:
        return self.db.get(CabinetModule, module_id)

    def list_modules(self, category: Optional[str] = None) -> List[CabinetModule]:
        '''
        列出模块，可按分类过滤（Bajos / Altos / Columnas ...），None 表示全部
        '''
        query = self.db.query(CabinetModule)
        if category:
            query = query.filter(CabinetModule.category == category)
        return query.order_by(CabinetModule.name, CabinetModule.id).all()

    def add_recipe_line(
        self,
        *,
        module_id: str,
        item_id: str,
        quantity: int,
        line_id: Optional[str] = None,
    ) -> ModuleRecipe:
        if quantity is None or int(quantity) < 1:
            raise ValueError("Recipe quantity must be >= 1")
        self._load_module(module_id)

        position = (
            self.db.query(func.count(ModuleRecipe.id))
            .filter(ModuleRecipe.module_id == module_id)
            .scalar()
        )
        line = ModuleRecipe(
            id=line_id or str(uuid4()),
            module_id=module_id,
            item_id=item_id,
            quantity=int(quantity),
            position=position or 0,
        )
        self.db.add(line)
        self.db.flush()
        return line

    def delete_recipes_by_module(self, module_id: str) -> int:
        deleted = (
            self.db.query(ModuleRecipe)
            .filter(ModuleRecipe.module_id == module_id)
            .delete(synchronize_session="fetch")
        )
        self.db.flush()
        return deleted

    def save_module(
        self,
        *,
        name: str,
        category: str,
        lines: Sequence[Tuple[str, int]],
        module_id: Optional[str] = None,
    ) -> CabinetModule:
        '''
        创建或更新模块，并整体替换其配方
        规则：
        - lines 为空（过滤后）时拒绝保存
        - quantity <= 0 的行被丢弃
        - 同一组件重复出现时数量合并
        - 更新时先删除旧配方，再按顺序写入新配方

        :param name: 模块名称
        :param category: 模块分类
        :param lines: [(item_id, quantity), ...]
        :param module_id: 为空则新建模块
        :return: 保存后的模块
        :rtype: CabinetModule
        '''
        merged: dict = {}
        for item_id, qty in lines:
            if not item_id:
                raise ValueError("Recipe line without component id")
            if int(qty) <= 0:
                continue
            merged[item_id] = merged.get(item_id, 0) + int(qty)
        if not merged:
            raise ValueError("Module recipe must contain at least one component")

        if module_id and self.get_module(module_id) is not None:
            module = self.update_module(module_id=module_id, name=name, category=category)
            self.delete_recipes_by_module(module.id)
        else:
            module = self.create_module(name=name, category=category, module_id=module_id)

        for item_id, qty in merged.items():
            self.add_recipe_line(module_id=module.id, item_id=item_id, quantity=qty)

        self.db.expire(module, ["recipes"])
        logger.info(f"module {module.id} saved with {len(merged)} recipe lines")
        return module

    def get_module_recipe(self, module_id: str) -> List[Tuple[ComponentItem, int]]:
        '''
        重建模块配方（组件, 数量），引用不存在组件的行被跳过
        '''
        module = self._load_module(module_id)
        result: List[Tuple[ComponentItem, int]] = []
        for line in module.recipes:
            item = self.get_component(line.item_id)
            if item is None:
                continue
            result.append((item, line.quantity))
        return result

    # =========
    # Vocabularies
    # =========
    def add_catalog_model(self, name: str) -> CatalogModel:
        return self._add_vocabulary(CatalogModel, name)

    def delete_catalog_model(self, vocab_id: str) -> None:
        self._delete_vocabulary(CatalogModel, vocab_id)

    def list_catalog_models(self) -> List[CatalogModel]:
        return self.db.query(CatalogModel).order_by(CatalogModel.name).all()

    def add_catalog_finish(self, name: str) -> CatalogFinish:
        return self._add_vocabulary(CatalogFinish, name)

    def delete_catalog_finish(self, vocab_id: str) -> None:
        self._delete_vocabulary(CatalogFinish, vocab_id)

    def list_catalog_finishes(self) -> List[CatalogFinish]:
        return self.db.query(CatalogFinish).order_by(CatalogFinish.name).all()

    # =========
    # Catalog provider
    # =========
    def load_snapshot(self) -> CatalogSnapshot:
        '''
        从数据库构建不可变的 CatalogSnapshot
        :raises InvalidSnapshotError: 任一行缺少必填字段时整体拒绝
        '''
        components = [
            {
                "id": c.id,
                "sku": c.sku,
                "name": c.name,
                "category": c.category,
                "unit_price": float(c.price) if c.price is not None else None,
                "width": c.width,
                "height": c.height,
                "depth": c.depth,
                "brand": c.brand,
                "model": c.model,
                "finish": c.finish,
                "hand": c.hand,
            }
            for c in self.list_components()
        ]
        modules = [
            {"id": m.id, "name": m.name, "category": m.category}
            for m in self.db.query(CabinetModule).order_by(CabinetModule.id).all()
        ]
        recipes = [
            {
                "id": r.id,
                "module_id": r.module_id,
                "component_id": r.item_id,
                "quantity": r.quantity,
            }
            for r in (
                self.db.query(ModuleRecipe)
                .order_by(ModuleRecipe.module_id, ModuleRecipe.position, ModuleRecipe.id)
                .all()
            )
        ]
        return CatalogSnapshot.from_rows(
            components=components,
            modules=modules,
            recipes=recipes,
            models=[m.name for m in self.list_catalog_models()],
            finishes=[f.name for f in self.list_catalog_finishes()],
        )

    def _load_module(self, module_id: str) -> CabinetModule:
        '''下载并返回指定ID的模块，找不到则抛异常'''
        if not module_id:
            raise ValueError("module_id is required")
        module = self.get_module(module_id)
        if module is None:
            raise ValueError(f"Module not found: {module_id}")
        return module

    def _add_vocabulary(self, model, name: str):
        name = (name or "").strip()
        if not name:
            raise ValueError("Name is required")
        entry = model(id=str(uuid4()), name=name)
        self.db.add(entry)
        try:
            self.db.flush()  # 触发唯一约束
        except IntegrityError:
            raise ValueError(f"{model.__name__} already exists: '{name}'")
        return entry

    def _delete_vocabulary(self, model, vocab_id: str) -> None:
        # 只影响可选列表，不影响已有组件
        entry = self.db.get(model, vocab_id)
        if entry is None:
            raise ValueError(f"{model.__name__} not found: {vocab_id}")
        self.db.delete(entry)
        self.db.flush()
