"""
启动前的建表检查：目录相关的表缺任何一张就执行 init_db
"""
from sqlalchemy import inspect
from furniture_bom.db.session import get_engine
from furniture_bom.db.init_db import init_db

REQUIRED_TABLES = {"items", "modules", "module_recipes", "catalog_models", "catalog_finishes"}


def missing_tables() -> set:
    """返回尚未创建的目录表"""
    try:
        existing = set(inspect(get_engine()).get_table_names())
    except Exception as e:
        print(f"⚠️ 无法读取数据库表结构: {e}")
        return set(REQUIRED_TABLES)
    return REQUIRED_TABLES - existing


def auto_init():
    missing = missing_tables()
    if not missing:
        print("✅ 目录表已就绪")
        return

    print(f"📦 缺少表 {sorted(missing)}，开始建表...")
    try:
        init_db()
    except Exception as e:
        print(f"❌ 建表失败: {e}")
        raise
    print("✅ 建表完成")


if __name__ == "__main__":
    auto_init()
