from furniture_bom.db.session import get_engine
from furniture_bom.db.base import Base
#-------------------导入所有表-----------------------
from furniture_bom.models.component_item import ComponentItem  # noqa: F401
from furniture_bom.models.cabinet_module import CabinetModule  # noqa: F401
from furniture_bom.models.module_recipe import ModuleRecipe  # noqa: F401
from furniture_bom.models.catalog_vocabulary import CatalogModel, CatalogFinish  # noqa: F401


def init_db():
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
