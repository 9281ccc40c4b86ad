import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from furniture_bom.db.base import Base
import furniture_bom.db.init_db  # noqa: F401  注册所有表
from furniture_bom.db.session import dispose_engine
from furniture_bom.engine.records import CatalogSnapshot, Component, Module, RecipeLine


@pytest.fixture
def db():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    dispose_engine()

    from furniture_bom.app_factory import create_app
    from furniture_bom.db.init_db import init_db

    init_db()
    app = create_app({
        "TESTING": True,
        "SESSION_FILE_DIR": str(tmp_path / "sessions"),
    })
    yield app
    dispose_engine()


@pytest.fixture
def client(app):
    return app.test_client()


def make_component(component_id, sku=None, **kwargs):
    data = {
        "id": component_id,
        "sku": sku or component_id.upper(),
        "name": kwargs.pop("name", component_id),
        "category": kwargs.pop("category", "hinge"),
        "unit_price": kwargs.pop("unit_price", 1.0),
    }
    data.update(kwargs)
    return Component(**data)


def make_snapshot(components, recipes, modules=None):
    """recipes: [(module_id, component_id, quantity), ...]"""
    recipe_lines = [
        RecipeLine(id=f"r{i}", module_id=m, component_id=c, quantity=q)
        for i, (m, c, q) in enumerate(recipes)
    ]
    if modules is None:
        module_ids = dict.fromkeys(m for m, _, _ in recipes)
        modules = [Module(id=m, name=m, category="Bajos") for m in module_ids]
    return CatalogSnapshot(
        components=tuple(components),
        modules=tuple(modules),
        recipes=tuple(recipe_lines),
    )


@pytest.fixture
def door_catalog():
    """door-white / door-black variants, module M1 uses the white one."""
    door_white = make_component(
        "door-white", sku="DW-01", name="Door White", category="door",
        width=60, height=72, depth=2, model="Classic", finish="White", unit_price=40,
    )
    door_black = make_component(
        "door-black", sku="DB-01", name="Door Black", category="door",
        width=60, height=72, depth=2, model="Classic", finish="Black", unit_price=45,
    )
    return make_snapshot([door_white, door_black], [("M1", "door-white", 1)])
