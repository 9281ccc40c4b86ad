import pytest

from furniture_bom.db.enums import Hand
from furniture_bom.engine.records import CatalogSnapshot, InvalidSnapshotError

COMPONENT = {"id": "c1", "sku": "S-1", "name": "Hinge", "category": "hinge", "unit_price": 1.2}


def test_from_rows_builds_lookup():
    snapshot = CatalogSnapshot.from_rows(
        components=[dict(COMPONENT, hand="Left")],
        modules=[{"id": "m1", "name": "Base 60", "category": "Bajos"}],
        recipes=[{"id": "r1", "module_id": "m1", "component_id": "c1", "quantity": 2}],
        models=["Classic"],
        finishes=["White"],
    )

    component = snapshot.get_component("c1")
    assert component.unit_price == 1.2
    assert component.hand == Hand.LEFT
    assert snapshot.get_component("missing") is None
    assert snapshot.models == ("Classic",)


def test_duplicate_ids_keep_first():
    snapshot = CatalogSnapshot.from_rows(
        components=[COMPONENT, dict(COMPONENT, sku="S-2")],
    )

    assert snapshot.get_component("c1").sku == "S-1"


@pytest.mark.parametrize("broken", [
    {k: v for k, v in COMPONENT.items() if k != "unit_price"},
    dict(COMPONENT, unit_price=-1),
    dict(COMPONENT, sku=""),
    dict(COMPONENT, id=None),
])
def test_invalid_component_rejects_snapshot(broken):
    with pytest.raises(InvalidSnapshotError):
        CatalogSnapshot.from_rows(components=[COMPONENT, broken])


def test_invalid_recipe_quantity_rejects_snapshot():
    with pytest.raises(InvalidSnapshotError):
        CatalogSnapshot.from_rows(
            components=[COMPONENT],
            recipes=[{"id": "r1", "module_id": "m1", "component_id": "c1", "quantity": 0}],
        )


def test_invalid_snapshot_is_value_error():
    assert issubclass(InvalidSnapshotError, ValueError)
