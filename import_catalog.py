# import_catalog.py
# 把目录 CSV（组件 + 模块配方）导入数据库
import argparse
from furniture_bom.db.auto_init import auto_init
from furniture_bom.db.session import get_session
from furniture_bom.logger import get_logger
from furniture_bom.services.catalog_service import CatalogService
from furniture_bom.services.csv_ingest_service import CsvIngestService
from run import configure_database

logger = get_logger("furniture_bom")


def import_catalog(items_path: str, recipes_path: str):
    """导入组件与配方；引用不存在组件的配方行会被跳过"""
    configure_database()
    auto_init()
    db = get_session()
    try:
        ingest_service = CsvIngestService(CatalogService(db))
        report = ingest_service.import_into_db(items_path, recipes_path)
        db.commit()
        print("✅ 目录导入成功!")
        print(f"   组件: {report.components_created}")
        print(f"   模块: {report.modules_created}")
        print(f"   配方行: {report.recipe_lines_created} (跳过 {report.recipe_lines_skipped})")
    except Exception as e:
        db.rollback()
        print(f"❌ 导入失败: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import catalog CSV exports")
    parser.add_argument("items_csv", help="Component CSV export")
    parser.add_argument("recipes_csv", help="Module recipe CSV export")
    args = parser.parse_args()
    import_catalog(args.items_csv, args.recipes_csv)
