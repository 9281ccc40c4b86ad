from furniture_bom.engine.bom import compute_bom
from furniture_bom.engine.records import GlobalSettings

from conftest import make_component, make_snapshot

BLACK = GlobalSettings(model="Classic", finish="Black")


def test_door_swapped_to_selected_finish(door_catalog):
    result = compute_bom(door_catalog, {"M1": 3}, BLACK)

    assert len(result.lines) == 1
    line = result.lines[0]
    assert line.component.id == "door-black"
    assert line.quantity == 3
    assert line.line_total == 135.0
    assert line.substituted
    assert line.original_component.id == "door-white"
    assert result.total == 135.0
    assert result.to_clipboard_text() == (
        "SKU\tName\tQuantity\tLineTotal\n"
        "DB-01\tDoor Black\t3\t135.00"
    )


def test_original_kept_without_settings(door_catalog):
    result = compute_bom(door_catalog, {"M1": 2}, GlobalSettings())

    assert [l.component.id for l in result.lines] == ["door-white"]
    assert result.total == 80.0
    assert not result.lines[0].substituted


def test_dangling_recipe_reference_is_skipped():
    hinge = make_component("hinge", sku="H-1", unit_price=2)
    snapshot = make_snapshot([hinge], [("M1", "hinge", 4), ("M1", "ghost", 1)])

    result = compute_bom(snapshot, {"M1": 1}, BLACK)

    assert [l.component.id for l in result.lines] == ["hinge"]
    assert result.total == 8.0


def test_modules_combined_and_sorted():
    hinge = make_component("hinge", sku="H-1", unit_price=1.5)
    side = make_component("side", sku="A-9", unit_price=20)
    snapshot = make_snapshot(
        [hinge, side],
        [("M1", "hinge", 2), ("M1", "side", 2), ("M2", "hinge", 4)],
    )

    result = compute_bom(snapshot, {"M1": 1, "M2": 2}, GlobalSettings())

    assert [(l.component.sku, l.quantity) for l in result.lines] == [("A-9", 2), ("H-1", 10)]
    assert result.total == 55.0


def test_deterministic(door_catalog):
    first = compute_bom(door_catalog, {"M1": 2}, BLACK)
    second = compute_bom(door_catalog, {"M1": 2}, BLACK)

    assert first == second
    assert first.to_clipboard_text() == second.to_clipboard_text()


def test_empty_basket(door_catalog):
    result = compute_bom(door_catalog, {}, BLACK)

    assert result.lines == []
    assert result.total == 0
