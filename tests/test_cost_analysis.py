from decimal import Decimal

from pricing_engine import analyze_margin, calculate_monthly_price
from pricing_engine.defaults import DEFAULT_ASSUMPTIONS


def test_margin_with_tier_cost_profile(payload):
    light = payload.get_tier("light")
    margin = analyze_margin(Decimal("850"), payload.assumptions, light)

    assert margin.labor_cost == Decimal("180.00")
    # light has no avionics figure of its own
    assert margin.avionics_db == Decimal("30")
    assert margin.cc_fee == Decimal("25")
    assert margin.total_cost == Decimal("635.00")
    assert margin.net_revenue == Decimal("215.00")
    assert margin.margin_pct == Decimal("0.2529")


def test_tier_avionics_figure_wins(payload):
    margin = analyze_margin(Decimal("3200"), payload.assumptions, payload.get_tier("turbine"))
    assert margin.avionics_db == Decimal("60")


def test_hangar_counts_as_cost(payload):
    breakdown = calculate_monthly_price("light", "0-20", [], "fa-hangar", payload)
    margin = analyze_margin(breakdown.total, payload.assumptions, payload.get_tier("light"), breakdown.hangar_cost)

    assert margin.final_price == Decimal("1750.00")
    assert margin.cc_fee == Decimal("51")
    assert margin.total_cost == Decimal("1561.00")
    assert margin.margin_pct == Decimal("0.1080")


def test_margin_accepts_plain_assumptions_and_no_tier():
    margin = analyze_margin(500, DEFAULT_ASSUMPTIONS)
    # 150 + 40 + 30 + 200 + round(14.5)
    assert margin.total_cost == Decimal("435.00")
    assert margin.net_revenue == Decimal("65.00")


def test_zero_price_has_zero_margin_pct(payload):
    margin = analyze_margin(0, payload.assumptions)
    assert margin.margin_pct == Decimal("0")
    assert margin.net_revenue < 0


def test_margin_to_dict(payload):
    data = analyze_margin(Decimal("850"), payload.assumptions, payload.get_tier("light")).to_dict()
    assert data["total_cost"] == 635.0
    assert data["margin_pct"] == 0.2529
