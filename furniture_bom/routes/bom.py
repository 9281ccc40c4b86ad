# furniture_bom/routes/bom.py
from flask import Blueprint, Response, jsonify, send_file
from furniture_bom.db.session import get_session
from furniture_bom.engine.records import InvalidSnapshotError
from furniture_bom.routes.basket import load_basket, load_settings
from furniture_bom.services.bom_report_service import BomReportService
from furniture_bom.services.catalog_service import CatalogService
from furniture_bom.schemas.dto.bom_dto import BomResultDTO

bom_bp = Blueprint('bom', __name__, url_prefix='/bom')


def _report_service() -> BomReportService:
    """每次请求重新读取目录快照，引擎本身不缓存"""
    db = get_session()
    try:
        snapshot = CatalogService(db).load_snapshot()
    finally:
        db.close()
    return BomReportService(snapshot)


@bom_bp.route('', methods=['GET'])
def view_bom():
    """当前购物篮的物料清单（替换后的组件、数量、小计、合计）"""
    try:
        service = _report_service()
    except InvalidSnapshotError as e:
        return jsonify(error=str(e)), 500
    result = service.calculate(load_basket(), load_settings())
    return jsonify(BomResultDTO.from_domain_model(result).model_dump())


@bom_bp.route('/clipboard', methods=['GET'])
def copy_table():
    """制表符分隔文本，直接粘贴到电子表格"""
    try:
        service = _report_service()
    except InvalidSnapshotError as e:
        return jsonify(error=str(e)), 500
    result = service.calculate(load_basket(), load_settings())
    return Response(service.to_clipboard_text(result), mimetype='text/plain')


@bom_bp.route('/excel', methods=['GET'])
def download_excel():
    """下载 Excel 格式清单"""
    try:
        service = _report_service()
    except InvalidSnapshotError as e:
        return jsonify(error=str(e)), 500
    result = service.calculate(load_basket(), load_settings())
    df = service.generate_df_report(result)
    output = service.to_excel_bytes(df)
    return send_file(
        output,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name='bom.xlsx'
    )
