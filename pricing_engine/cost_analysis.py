# Internal margin analysis - never part of a customer-facing price

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from .catalog import PricingAssumptions
from .money import ZERO, money_to_json, round_cents, to_decimal


@dataclass(frozen=True)
class MarginBreakdown:
    final_price: Decimal
    labor_cost: Decimal
    cfi: Decimal
    cleaning: Decimal
    avionics_db: Decimal
    consumables: Decimal
    overhead: Decimal
    cc_fee: Decimal
    hangar_cost: Decimal
    total_cost: Decimal
    net_revenue: Decimal
    margin_pct: Decimal

    def to_dict(self):
        data = {
            name: money_to_json(getattr(self, name))
            for name in (
                "final_price", "labor_cost", "cfi", "cleaning", "avionics_db", "consumables",
                "overhead", "cc_fee", "hangar_cost", "total_cost", "net_revenue",
            )
        }
        data["margin_pct"] = float(self.margin_pct)
        return data


def analyze_margin(final_price, assumptions, tier=None, hangar_cost=None):
    """
    Cost and margin for one aircraft at a given monthly price.

    The card fee is rounded to whole dollars, matching how the processor
    statements are reconciled. Tier cost profile (labor hours, avionics
    database, consumables) is optional; without it only the global
    assumptions count.
    """
    if not isinstance(assumptions, PricingAssumptions):
        assumptions = PricingAssumptions.from_row(assumptions)
    final_price = to_decimal(final_price, "0")
    hangar_cost = to_decimal(hangar_cost, "0")

    labor_hours = tier.labor_hours if tier is not None else ZERO
    labor_cost = labor_hours * assumptions.labor_rate
    if tier is not None and tier.avionics_db:
        avionics_db = tier.avionics_db
    else:
        avionics_db = assumptions.avionics_db_per_ac
    consumables = tier.consumables if tier is not None else ZERO

    cc_fee = (final_price * assumptions.card_fee_pct / 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    total_cost = (
        hangar_cost + labor_cost + assumptions.cfi_allocation + assumptions.cleaning_supplies
        + avionics_db + consumables + assumptions.overhead_per_ac + cc_fee
    )
    net_revenue = final_price - total_cost
    margin_pct = (net_revenue / final_price).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP) if final_price > 0 else ZERO

    return MarginBreakdown(
        final_price=final_price,
        labor_cost=round_cents(labor_cost),
        cfi=assumptions.cfi_allocation,
        cleaning=assumptions.cleaning_supplies,
        avionics_db=avionics_db,
        consumables=consumables,
        overhead=assumptions.overhead_per_ac,
        cc_fee=cc_fee,
        hangar_cost=hangar_cost,
        total_cost=round_cents(total_cost),
        net_revenue=round_cents(net_revenue),
        margin_pct=margin_pct,
    )
