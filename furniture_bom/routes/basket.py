# furniture_bom/routes/basket.py
from flask import Blueprint, current_app, request, jsonify, session
from furniture_bom.db.session import get_session
from furniture_bom.engine.records import GlobalSettings
from furniture_bom.services import basket_service
from furniture_bom.services.catalog_service import CatalogService

basket_bp = Blueprint('basket', __name__, url_prefix='/basket')


def load_basket() -> dict:
    """购物篮保存在 server-side session 中，读出时统一规范化"""
    return basket_service.normalize_basket(session.get('basket', {}))


def save_basket(basket: dict) -> None:
    session['basket'] = basket


def load_settings() -> GlobalSettings:
    raw = session.get('settings') or {
        'model': current_app.config.get('BOM_DEFAULT_MODEL'),
        'finish': current_app.config.get('BOM_DEFAULT_FINISH'),
    }
    return GlobalSettings(model=raw.get('model'), finish=raw.get('finish'))


def _quantity(payload, default=None) -> int:
    value = payload.get('quantity', default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid quantity: {value!r}")


@basket_bp.route('', methods=['GET'])
def get_basket():
    return jsonify(basket=load_basket())


@basket_bp.route('/<module_id>', methods=['POST'])
def add_module(module_id):
    """加入购物篮（累加，默认 1）"""
    payload = request.get_json(silent=True) or {}
    try:
        basket = basket_service.add_to_basket(load_basket(), module_id, _quantity(payload, 1))
    except ValueError as e:
        return jsonify(error=str(e)), 400
    save_basket(basket)
    return jsonify(basket=basket)


@basket_bp.route('/<module_id>', methods=['PUT'])
def update_module(module_id):
    """设置数量，<= 0 即移除"""
    payload = request.get_json(silent=True) or {}
    try:
        basket = basket_service.update_basket(load_basket(), module_id, _quantity(payload))
    except ValueError as e:
        return jsonify(error=str(e)), 400
    save_basket(basket)
    return jsonify(basket=basket)


@basket_bp.route('/<module_id>', methods=['DELETE'])
def remove_module(module_id):
    basket = basket_service.remove_from_basket(load_basket(), module_id)
    save_basket(basket)
    return jsonify(basket=basket)


@basket_bp.route('', methods=['DELETE'])
def clear_basket():
    save_basket({})
    return jsonify(basket={})


@basket_bp.route('/settings', methods=['GET'])
def get_settings():
    return jsonify(load_settings().model_dump())


@basket_bp.route('/settings', methods=['PUT'])
def set_settings():
    """
    设置全局外观（model / finish），词表非空时必须是词表中的值
    """
    payload = request.get_json(silent=True) or {}
    current = load_settings()
    model = payload.get('model', current.model)
    finish = payload.get('finish', current.finish)

    db = get_session()
    try:
        service = CatalogService(db)
        models = {m.name for m in service.list_catalog_models()}
        finishes = {f.name for f in service.list_catalog_finishes()}
    finally:
        db.close()

    if model and models and model not in models:
        return jsonify(error=f"Unknown model: {model}"), 400
    if finish and finishes and finish not in finishes:
        return jsonify(error=f"Unknown finish: {finish}"), 400

    settings = GlobalSettings(model=model, finish=finish)
    session['settings'] = settings.model_dump()
    return jsonify(settings.model_dump())
