# furniture_bom/routes/catalog.py
from flask import Blueprint, request, jsonify
from furniture_bom.db.enums import Hand
from furniture_bom.db.session import get_session
from furniture_bom.services.catalog_service import CatalogService
from furniture_bom.schemas.dto.catalog_dto import ComponentDTO, ModuleDTO, VocabularyDTO

catalog_bp = Blueprint('catalog', __name__, url_prefix='/catalog')


def _recipe_lines(payload) -> list:
    """
    body 中的 recipe: [{"component_id", "quantity"}] -> [(component_id, quantity)]
    :raises ValueError: 结构或数量不合法
    """
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    recipe = payload.get('recipe', [])
    if not isinstance(recipe, list):
        raise ValueError("recipe must be a list")
    lines = []
    for line in recipe:
        if not isinstance(line, dict):
            raise ValueError(f"Invalid recipe line: {line!r}")
        try:
            quantity = int(line.get('quantity', 0))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid quantity: {line.get('quantity')!r}")
        lines.append((line.get('component_id'), quantity))
    return lines


@catalog_bp.route('/components', methods=['GET'])
def list_components():
    """组件列表 / 搜索（?q=名称或SKU）"""
    db = get_session()
    try:
        service = CatalogService(db)
        items = service.search_components(request.args.get('q', ''))
        return jsonify([ComponentDTO.from_orm_model(i).model_dump() for i in items])
    finally:
        db.close()


@catalog_bp.route('/components', methods=['POST'])
def create_component():
    """新建组件"""
    payload = request.get_json(silent=True) or {}
    db = get_session()
    try:
        service = CatalogService(db)
        hand = payload.get('hand')
        item = service.create_component(
            name=payload.get('name', ''),
            price=payload.get('price'),
            sku=payload.get('sku'),
            category=payload.get('category'),
            width=payload.get('width'),
            height=payload.get('height'),
            depth=payload.get('depth'),
            brand=payload.get('brand'),
            model=payload.get('model'),
            finish=payload.get('finish'),
            hand=Hand(hand) if hand else None,
        )
        db.commit()
        return jsonify(ComponentDTO.from_orm_model(item).model_dump()), 201
    except ValueError as e:
        db.rollback()
        return jsonify(error=str(e)), 400
    finally:
        db.close()


@catalog_bp.route('/modules', methods=['GET'])
def list_modules():
    """模块列表，?category=Bajos 过滤；Todos / 空 表示全部"""
    category = request.args.get('category')
    if category == 'Todos':
        category = None
    db = get_session()
    try:
        modules = CatalogService(db).list_modules(category=category)
        return jsonify([ModuleDTO.from_orm_model(m).model_dump() for m in modules])
    finally:
        db.close()


@catalog_bp.route('/modules/<module_id>', methods=['GET'])
def get_module(module_id):
    """模块详情（含配方）"""
    db = get_session()
    try:
        service = CatalogService(db)
        module = service.get_module(module_id)
        if module is None:
            return jsonify(error=f"Module not found: {module_id}"), 404
        recipe = service.get_module_recipe(module_id)
        return jsonify(ModuleDTO.from_orm_model(module, recipe).model_dump())
    finally:
        db.close()


@catalog_bp.route('/modules', methods=['POST'])
def save_module():
    """
    新建模块或更新已有模块（传 id），配方整体替换
    body: {"id"?, "name", "category", "recipe": [{"component_id", "quantity"}]}
    """
    payload = request.get_json(silent=True) or {}
    db = get_session()
    try:
        service = CatalogService(db)
        lines = _recipe_lines(payload)
        module = service.save_module(
            module_id=payload.get('id'),
            name=payload.get('name', ''),
            category=payload.get('category') or 'Bajos',
            lines=lines,
        )
        db.commit()
        recipe = service.get_module_recipe(module.id)
        return jsonify(ModuleDTO.from_orm_model(module, recipe).model_dump()), 201
    except ValueError as e:
        db.rollback()
        return jsonify(error=str(e)), 400
    finally:
        db.close()


@catalog_bp.route('/modules/<module_id>', methods=['PUT'])
def update_module(module_id):
    """只改名称 / 分类，不动配方"""
    payload = request.get_json(silent=True) or {}
    db = get_session()
    try:
        service = CatalogService(db)
        module = service.update_module(
            module_id=module_id,
            name=payload.get('name', ''),
            category=payload.get('category'),
        )
        db.commit()
        return jsonify(ModuleDTO.from_orm_model(module).model_dump())
    except ValueError as e:
        db.rollback()
        return jsonify(error=str(e)), 400
    finally:
        db.close()


@catalog_bp.route('/modules/<module_id>/recipe', methods=['PUT'])
def replace_recipe(module_id):
    """整体替换配方，名称 / 分类保持不变"""
    payload = request.get_json(silent=True) or {}
    db = get_session()
    try:
        service = CatalogService(db)
        module = service.get_module(module_id)
        if module is None:
            return jsonify(error=f"Module not found: {module_id}"), 404
        lines = _recipe_lines(payload)
        module = service.save_module(
            module_id=module.id,
            name=module.name,
            category=module.category,
            lines=lines,
        )
        db.commit()
        recipe = service.get_module_recipe(module.id)
        return jsonify(ModuleDTO.from_orm_model(module, recipe).model_dump())
    except ValueError as e:
        db.rollback()
        return jsonify(error=str(e)), 400
    finally:
        db.close()


@catalog_bp.route('/<vocabulary>', methods=['GET'])
def list_vocabulary(vocabulary):
    """models / finishes 列表"""
    db = get_session()
    try:
        service = CatalogService(db)
        if vocabulary == 'models':
            entries = service.list_catalog_models()
        elif vocabulary == 'finishes':
            entries = service.list_catalog_finishes()
        else:
            return jsonify(error=f"Unknown vocabulary: {vocabulary}"), 404
        return jsonify([VocabularyDTO.from_orm_model(e).model_dump() for e in entries])
    finally:
        db.close()


@catalog_bp.route('/<vocabulary>', methods=['POST'])
def add_vocabulary(vocabulary):
    payload = request.get_json(silent=True) or {}
    db = get_session()
    try:
        service = CatalogService(db)
        if vocabulary == 'models':
            entry = service.add_catalog_model(payload.get('name', ''))
        elif vocabulary == 'finishes':
            entry = service.add_catalog_finish(payload.get('name', ''))
        else:
            return jsonify(error=f"Unknown vocabulary: {vocabulary}"), 404
        db.commit()
        return jsonify(VocabularyDTO.from_orm_model(entry).model_dump()), 201
    except ValueError as e:
        db.rollback()
        return jsonify(error=str(e)), 400
    finally:
        db.close()


@catalog_bp.route('/<vocabulary>/<vocab_id>', methods=['DELETE'])
def delete_vocabulary(vocabulary, vocab_id):
    db = get_session()
    try:
        service = CatalogService(db)
        if vocabulary == 'models':
            service.delete_catalog_model(vocab_id)
        elif vocabulary == 'finishes':
            service.delete_catalog_finish(vocab_id)
        else:
            return jsonify(error=f"Unknown vocabulary: {vocabulary}"), 404
        db.commit()
        return '', 204
    except ValueError as e:
        db.rollback()
        return jsonify(error=str(e)), 404
    finally:
        db.close()
