import pytest

from crm_documents.core.calculations.totals_engine import TotalsEngine, compute_totals
from crm_documents.core.models.line_item import DocumentTotals, LineItem


def test_single_line_with_tax():
    totals = compute_totals([{"qty": 2, "unit_minor": 1000, "tax_rate_pct": 25, "discount_pct": 0}])

    assert totals == DocumentTotals(subtotal_minor=2000, tax_minor=500, total_minor=2500)


def test_line_discount_halves_subtotal():
    totals = compute_totals([{"qty": 1, "unit_minor": 10000, "tax_rate_pct": 0, "discount_pct": 50}])

    assert totals.subtotal_minor == 5000
    assert totals.tax_minor == 0


def test_empty_list_is_all_zero():
    assert compute_totals([]) == DocumentTotals.zero()
    assert compute_totals(None) == DocumentTotals(0, 0, 0)


def test_document_defaults_apply_only_when_line_has_no_rate():
    engine = TotalsEngine(default_tax_pct=25, default_discount_pct=10)
    own = LineItem(qty=1, unit_minor=1000, tax_rate_pct=0, discount_pct=0)
    inherited = LineItem(qty=1, unit_minor=1000)

    assert engine.line_totals(own).total_minor == 1000
    inherited_totals = engine.line_totals(inherited)
    assert inherited_totals.after_discount_minor == 900
    assert inherited_totals.tax_minor == 225


def test_missing_and_nan_fields_coalesce_to_zero():
    rows = [
        {"description": "x"},
        {"qty": float("nan"), "unit_minor": 500},
        {"qty": "abc", "unit_minor": None, "tax_rate_pct": "n/a"},
    ]

    assert compute_totals(rows, tax_pct=25) == DocumentTotals(0, 0, 0)


def test_rounding_half_up_per_line():
    # 3 * 333 = 999 at 12.5 % tax -> 124.875 -> 125
    line = TotalsEngine().line_totals({"qty": 3, "unit_minor": 333, "tax_rate_pct": 12.5})

    assert line.after_discount_minor == 999
    assert line.tax_minor == 125
    assert line.total_minor == 1124


def test_fractional_quantity():
    line = TotalsEngine().line_totals({"qty": 1.5, "unit_minor": 999, "tax_rate_pct": 25})

    assert line.gross_minor == 1499  # 1498.5 rounds up
    assert line.after_discount_minor == 1499
    assert line.tax_minor == 375


def test_negative_values_pass_through():
    totals = compute_totals([{"qty": -1, "unit_minor": 1000, "tax_rate_pct": 25}])

    assert totals.subtotal_minor == -1000
    assert totals.tax_minor == -250
    assert totals.total_minor == -1250


@pytest.mark.parametrize(
    "rows",
    [
        [{"qty": 3, "unit_minor": 1999, "tax_rate_pct": 25, "discount_pct": 7.5}],
        [{"qty": 0.333, "unit_minor": 12345, "tax_rate_pct": 12}, {"qty": 7, "unit_minor": 1, "discount_pct": 33.3}],
        [{"qty": 1, "unit_minor": 10, "tax_rate_pct": 99.9, "discount_pct": 0.1}] * 25,
    ],
)
def test_total_is_subtotal_plus_tax(rows):
    totals = compute_totals(rows, tax_pct=25, discount_pct=5)

    assert isinstance(totals.total_minor, int)
    assert totals.total_minor == totals.subtotal_minor + totals.tax_minor


def test_camel_case_records_are_accepted():
    item = LineItem.from_record({"description": "Kaffe", "qty": "2", "unitMinor": 1250, "taxRatePct": 25, "discountPct": None})

    assert item.qty == 2.0
    assert item.unit_minor == 1250
    assert item.tax_rate_pct == 25
    assert item.discount_pct is None


def test_as_dict_keys():
    assert compute_totals([{"qty": 1, "unit_minor": 100}], tax_pct=25).as_dict() == {
        "subtotal_minor": 100,
        "tax_minor": 25,
        "total_minor": 125,
    }
