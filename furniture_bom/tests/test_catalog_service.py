import re

import pytest

from furniture_bom.db.enums import Hand
from furniture_bom.engine.bom import compute_bom
from furniture_bom.engine.records import GlobalSettings
from furniture_bom.services.catalog_service import CatalogService
from furniture_bom.services.csv_ingest_service import CsvIngestService


@pytest.fixture
def service(db):
    return CatalogService(db)


def _door(service, component_id, finish, price):
    return service.create_component(
        component_id=component_id,
        sku=f"DOOR-{finish.upper()}",
        name=f"Door {finish}",
        category="door",
        price=price,
        width=60, height=72, depth=2,
        model="Classic", finish=finish, hand=Hand.LEFT,
    )


def test_create_component_defaults(service):
    item = service.create_component(name="  Shelf pin  ", price=0.2)

    assert item.name == "Shelf pin"
    assert item.sku.startswith("GEN-")
    assert item.category == "General"
    assert item.hand == Hand.NONE
    assert re.fullmatch(r"GEN-\d{4}", item.sku)
    assert service.get_component(item.id) is item


@pytest.mark.parametrize("kwargs", [
    {"name": "", "price": 1},
    {"name": "Hinge", "price": None},
    {"name": "Hinge", "price": -0.5},
    {"name": "Hinge", "price": "abc"},
    {"name": "Hinge", "price": "NaN"},
    {"name": "Hinge", "price": [1]},
])
def test_create_component_rejects_invalid(service, kwargs):
    with pytest.raises(ValueError):
        service.create_component(**kwargs)


def test_search_by_name_or_sku(service):
    service.create_component(name="Hinge Soft Close", sku="HNG-01", price=2)
    service.create_component(name="Door White", sku="DW-01", price=40)
    service.create_component(name="Leg", sku="LEG-HNG", price=1)

    assert [i.sku for i in service.search_components("hinge")] == ["HNG-01"]
    assert [i.sku for i in service.search_components("HNG")] == ["HNG-01", "LEG-HNG"]
    assert len(service.search_components("")) == 3
    assert len(service.search_components("", limit=2)) == 2


def test_save_module_merges_and_drops_lines(service):
    hinge = service.create_component(name="Hinge", sku="H-1", price=1)
    side = service.create_component(name="Side", sku="S-1", price=10)

    module = service.save_module(
        name="Base 60",
        category="Bajos",
        lines=[(hinge.id, 2), (side.id, 2), (hinge.id, 2), (side.id, 0)],
    )

    recipe = service.get_module_recipe(module.id)
    assert [(item.sku, qty) for item, qty in recipe] == [("H-1", 4), ("S-1", 2)]


def test_save_module_replaces_recipe(service):
    hinge = service.create_component(name="Hinge", sku="H-1", price=1)
    side = service.create_component(name="Side", sku="S-1", price=10)
    module = service.save_module(name="Base 60", category="Bajos", lines=[(hinge.id, 2)])
    assert len(service.get_module_recipe(module.id)) == 1

    updated = service.save_module(
        module_id=module.id, name="Base 60 v2", category="Altos", lines=[(side.id, 1)]
    )

    assert updated.id == module.id
    assert updated.name == "Base 60 v2"
    assert updated.category == "Altos"
    assert [(item.sku, qty) for item, qty in service.get_module_recipe(module.id)] == [("S-1", 1)]


def test_save_module_rejects_empty_recipe(service):
    hinge = service.create_component(name="Hinge", sku="H-1", price=1)

    with pytest.raises(ValueError):
        service.save_module(name="Empty", category="Bajos", lines=[])
    with pytest.raises(ValueError):
        service.save_module(name="Zero", category="Bajos", lines=[(hinge.id, 0)])
    with pytest.raises(ValueError):
        service.save_module(name="NoId", category="Bajos", lines=[(None, 1)])


def test_module_recipe_skips_dangling_lines(service):
    hinge = service.create_component(name="Hinge", sku="H-1", price=1)
    module = service.create_module(name="Base", category="Bajos")
    service.add_recipe_line(module_id=module.id, item_id=hinge.id, quantity=2)
    service.add_recipe_line(module_id=module.id, item_id="ghost", quantity=1)

    assert [(item.id, qty) for item, qty in service.get_module_recipe(module.id)] == [(hinge.id, 2)]


def test_add_recipe_line_validation(service):
    module = service.create_module(name="Base", category="Bajos")

    with pytest.raises(ValueError):
        service.add_recipe_line(module_id=module.id, item_id="x", quantity=0)
    with pytest.raises(ValueError):
        service.add_recipe_line(module_id="missing", item_id="x", quantity=1)


def test_list_modules_by_category(service):
    service.create_module(name="Base", category="Bajos")
    service.create_module(name="Wall", category="Altos")

    assert [m.name for m in service.list_modules()] == ["Base", "Wall"]
    assert [m.name for m in service.list_modules(category="Altos")] == ["Wall"]


def test_vocabularies(db, service):
    tokyo = service.add_catalog_model("Tokyo")
    service.add_catalog_finish("Rojo Mate")
    db.commit()

    assert [m.name for m in service.list_catalog_models()] == ["Tokyo"]
    assert [f.name for f in service.list_catalog_finishes()] == ["Rojo Mate"]

    with pytest.raises(ValueError):
        service.add_catalog_model("Tokyo")
    db.rollback()

    service.delete_catalog_model(tokyo.id)
    assert service.list_catalog_models() == []
    with pytest.raises(ValueError):
        service.delete_catalog_model(tokyo.id)


def test_load_snapshot_feeds_engine(service):
    white = _door(service, "door-white", "White", 40)
    _door(service, "door-black", "Black", 45)
    module = service.save_module(name="Base", category="Bajos", lines=[(white.id, 1)])
    service.add_catalog_model("Classic")

    snapshot = service.load_snapshot()

    assert snapshot.get_component("door-white").unit_price == 40.0
    assert snapshot.get_component("door-white").hand == Hand.LEFT
    assert snapshot.models == ("Classic",)

    result = compute_bom(snapshot, {module.id: 3}, GlobalSettings(model="Classic", finish="Black"))
    assert [l.component.id for l in result.lines] == ["door-black"]
    assert result.total == 135.0


def test_admin_component_swaps_to_imported_variant(tmp_path, service):
    items = tmp_path / "items.csv"
    recipes = tmp_path / "recipes.csv"
    items.write_text(
        "id,sku_obramat,name,category,price_cost,dimensions_width,dimensions_height,"
        "dimensions_depth,brand,model_series,finish_color\n"
        "door-black,DB,Puerta Negra,door,45,60,72,2,,Classic,Black\n",
        encoding="utf-8",
    )
    recipes.write_text("id,module_id,component_id,quantity\n", encoding="utf-8")
    CsvIngestService(service).import_into_db(str(items), str(recipes))

    white = service.create_component(
        sku="DW", name="Door White", category="door", price=40,
        width=60, height=72, depth=2, model="Classic", finish="White",
    )
    module = service.save_module(name="Base", category="Bajos", lines=[(white.id, 1)])

    result = compute_bom(
        service.load_snapshot(), {module.id: 1}, GlobalSettings(model="Classic", finish="Black")
    )

    assert [l.component.sku for l in result.lines] == ["DB"]
    assert result.lines[0].original_component.sku == "DW"
