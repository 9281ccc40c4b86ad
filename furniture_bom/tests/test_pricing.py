import pytest

from furniture_bom.engine.pricing import price_lines
from furniture_bom.engine.substitution import ResolvedEntry

from conftest import make_component


def test_lines_sorted_by_sku_with_totals():
    entries = [
        ResolvedEntry(make_component("b", sku="B050", unit_price=2.5), 4),
        ResolvedEntry(make_component("a1", sku="A100", unit_price=1.0), 3),
        ResolvedEntry(make_component("a0", sku="A050", unit_price=10.0), 1),
    ]

    result = price_lines(entries)

    assert [l.component.sku for l in result.lines] == ["A050", "A100", "B050"]
    assert [l.line_total for l in result.lines] == [10.0, 3.0, 10.0]
    assert result.total == pytest.approx(23.0)


def test_equal_skus_keep_input_order():
    first = make_component("first", sku="SAME", unit_price=1)
    second = make_component("second", sku="SAME", unit_price=2)

    result = price_lines([ResolvedEntry(first, 1), ResolvedEntry(second, 1)])

    assert [l.component.id for l in result.lines] == ["first", "second"]


def test_total_matches_sum_of_lines():
    entries = [
        ResolvedEntry(make_component(f"c{i}", sku=f"S{i:03d}", unit_price=0.1 * i), i)
        for i in range(1, 8)
    ]

    result = price_lines(entries)

    assert result.total == pytest.approx(sum(l.line_total for l in result.lines))


def test_empty_entries():
    result = price_lines([])

    assert result.lines == []
    assert result.total == 0
    assert result.to_clipboard_text() == "SKU\tName\tQuantity\tLineTotal"


def test_clipboard_text_format():
    original = make_component("w", sku="W-1", unit_price=1)
    entries = [
        ResolvedEntry(make_component("h", sku="H-1", name="Hinge", unit_price=1.5), 4),
        ResolvedEntry(make_component("d", sku="D-1", name="Door", unit_price=45), 1, original),
    ]

    text = price_lines(entries).to_clipboard_text()

    assert text == (
        "SKU\tName\tQuantity\tLineTotal\n"
        "D-1\tDoor\t1\t45.00\n"
        "H-1\tHinge\t4\t6.00"
    )
