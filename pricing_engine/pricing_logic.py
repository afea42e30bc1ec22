# Pricing Logic - tier x usage band x add-ons + hangar, against a catalog payload

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from .catalog import CatalogPayload
from .errors import MissingInput
from .money import ZERO, money_to_json, round_cents, to_decimal

logger = logging.getLogger(__name__)

HANGAR_NOT_SELECTED = "not_selected"
HANGAR_OWN_STORAGE = "own_storage"
HANGAR_SELECTED = "selected"

# Multi-aircraft discount: 15% off for a 2nd aircraft, another 10% per aircraft after that
SECOND_AIRCRAFT_DISCOUNT = Decimal("0.15")
ADDITIONAL_AIRCRAFT_DISCOUNT = Decimal("0.10")


@dataclass(frozen=True)
class AddOnLine:
    id: str
    name: str
    amount: Decimal

    def to_dict(self):
        return {"id": self.id, "name": self.name, "amount": money_to_json(self.amount)}


@dataclass(frozen=True)
class PriceBreakdown:
    """Result of one monthly price calculation"""
    tier_id: str
    usage_band_id: str
    base_price: Decimal
    multiplier: Decimal
    usage_adjusted_price: Decimal
    addons_total: Decimal
    hangar_cost: Decimal
    total: Decimal
    location_id: str = None
    hangar_status: str = HANGAR_NOT_SELECTED
    addons: tuple = field(default_factory=tuple)
    ignored_addon_ids: tuple = field(default_factory=tuple)

    @property
    def hangar_selected(self):
        return self.hangar_status != HANGAR_NOT_SELECTED

    @property
    def service_price(self):
        """Everything except hangar"""
        return self.usage_adjusted_price + self.addons_total

    def to_dict(self):
        return {
            "tierId": self.tier_id,
            "usageBandId": self.usage_band_id,
            "locationId": self.location_id,
            "basePrice": money_to_json(self.base_price),
            "multiplier": float(self.multiplier),
            "usageAdjustedPrice": money_to_json(self.usage_adjusted_price),
            "addOns": [line.to_dict() for line in self.addons],
            "addOnsTotal": money_to_json(self.addons_total),
            "ignoredAddOnIds": list(self.ignored_addon_ids),
            "hangarCost": money_to_json(self.hangar_cost),
            "hangarSelected": self.hangar_selected,
            "hangarStatus": self.hangar_status,
            "total": money_to_json(self.total),
        }


def _as_payload(payload):
    return CatalogPayload.from_dict(payload)


def addon_cost(addon, tier, band, usage_adjusted_price):
    """Evaluate an add-on's pricing descriptor for the given tier/band context"""
    pricing = addon.pricing
    if pricing.type == "percent_of_service":
        return round_cents(usage_adjusted_price * pricing.percent / 100)
    if pricing.type == "per_flight_hour":
        return round_cents(pricing.rate * band.representative_hours)
    if pricing.type == "per_tier":
        for tier_id, amount in pricing.tier_prices:
            if tier_id == tier.id:
                return amount
        return pricing.default if pricing.default is not None else ZERO
    return pricing.price


def _selected_ids(selected_addon_ids):
    # order-preserving de-duplication; a set of ids counts each add-on once
    seen = []
    for addon_id in selected_addon_ids or []:
        if addon_id not in seen:
            seen.append(addon_id)
    return seen


def calculate_monthly_price(tier_id, usage_band_id, selected_addon_ids, location_id, payload,
                            include_inactive=False):
    """
    Calculate the monthly price for one selection against a catalog payload.

    Args:
        tier_id (str): Tier slug, must resolve in the payload
        usage_band_id (str): Usage band id; there is no default band
        selected_addon_ids (iterable): Add-on ids; unknown or inapplicable ids are ignored
        location_id (str): Location id or slug, or None when no hangar is chosen yet
        payload (CatalogPayload | dict): Published snapshot payload (or live catalog)
        include_inactive (bool): Resolve deactivated tiers/locations too (billing reproduction)

    Returns:
        PriceBreakdown

    Raises:
        MissingInput: tier or usage band not supplied
        NotFound: tier, usage band or location not in the payload
    """
    if not tier_id:
        raise MissingInput("tier")
    if not usage_band_id:
        raise MissingInput("usage band")

    catalog = _as_payload(payload)
    tier = catalog.get_tier(tier_id, include_inactive=include_inactive)
    band = catalog.get_band(usage_band_id)
    location = None
    if location_id:
        location = catalog.get_location(location_id, include_inactive=include_inactive)

    base_price = tier.base_monthly
    # the only rounding step for the service price
    usage_adjusted_price = round_cents(base_price * band.multiplier)

    lines = []
    ignored = []
    for addon_id in _selected_ids(selected_addon_ids):
        addon = catalog.find_addon(addon_id)
        if addon is None or not addon.active or not addon.applies_to(tier.id):
            ignored.append(addon_id)
            continue
        lines.append(AddOnLine(addon.id, addon.name, addon_cost(addon, tier, band, usage_adjusted_price)))
    if ignored:
        logger.debug("Ignoring add-ons %s for tier %s", ignored, tier.id)
    addons_total = sum((line.amount for line in lines), ZERO)

    if location is None:
        hangar_cost = ZERO
        hangar_status = HANGAR_NOT_SELECTED
    else:
        hangar_cost = location.hangar_cost_monthly
        hangar_status = HANGAR_OWN_STORAGE if location.is_own_storage else HANGAR_SELECTED

    return PriceBreakdown(
        tier_id=tier.id,
        usage_band_id=band.id,
        base_price=base_price,
        multiplier=band.multiplier,
        usage_adjusted_price=usage_adjusted_price,
        addons_total=addons_total,
        hangar_cost=hangar_cost,
        total=usage_adjusted_price + addons_total + hangar_cost,
        location_id=location.id if location else None,
        hangar_status=hangar_status,
        addons=tuple(lines),
        ignored_addon_ids=tuple(ignored),
    )


def price_without_hangar(tier_id, usage_band_id, selected_addon_ids, payload, include_inactive=False):
    return calculate_monthly_price(tier_id, usage_band_id, selected_addon_ids, None, payload,
                                   include_inactive=include_inactive)


def price_table(tier_id, payload, selected_addon_ids=None, location_id=None):
    """Price of one tier at every usage band, lowest band first"""
    catalog = _as_payload(payload)
    return [
        calculate_monthly_price(tier_id, band.id, selected_addon_ids, location_id, catalog)
        for band in catalog.usage_bands
    ]


def tier_starting_prices(payload):
    """'From' price per active tier: the lowest band with no add-ons or hangar"""
    catalog = _as_payload(payload)
    if not catalog.usage_bands:
        return {}
    lowest_band = catalog.usage_bands[0]
    return {
        tier.id: calculate_monthly_price(tier.id, lowest_band.id, [], None, catalog).total
        for tier in catalog.active_tiers()
    }


def recommend_usage_band(avg_monthly_hours, payload):
    """Band containing the given monthly hours, or None when hours are unknown"""
    if avg_monthly_hours is None or avg_monthly_hours == "":
        return None
    hours = to_decimal(avg_monthly_hours)
    if hours < 0:
        raise ValueError("Monthly hours cannot be negative")
    catalog = _as_payload(payload)
    for band in catalog.usage_bands:
        if band.contains(hours):
            return band
    return None


def recommend_tier(make, model, payload):
    """
    Suggest a tier for an aircraft by matching the tier's example labels and
    family patterns ("citation", "cirrus") against the make/model text.
    Falls back to the first active tier.
    """
    catalog = _as_payload(payload)
    tiers = catalog.active_tiers()
    if not tiers:
        return None
    combined = f"{make or ''} {model or ''}".lower()
    compact = combined.replace(" ", "").replace("-", "")
    # most specific tiers last in sort order win, e.g. "Vision Jet" before "Cirrus"
    for tier in reversed(tiers):
        for needle in [example.lower() for example in tier.examples] + list(tier.match_patterns):
            if needle and (needle in combined or needle.replace(" ", "").replace("-", "") in compact):
                return tier
    return tiers[0]


def calculate_multi_aircraft_discount(aircraft_count, monthly_price):
    """
    Fleet discount applied to one aircraft's monthly price.

    Returns:
        dict: {"discount": Decimal, "finalPrice": Decimal}
    """
    monthly_price = to_decimal(monthly_price)
    aircraft_count = int(aircraft_count)
    if aircraft_count <= 1:
        return {"discount": ZERO, "finalPrice": round_cents(monthly_price)}

    discount = monthly_price * SECOND_AIRCRAFT_DISCOUNT
    if aircraft_count >= 3:
        discount += monthly_price * ADDITIONAL_AIRCRAFT_DISCOUNT * (aircraft_count - 2)
    discount = min(round_cents(discount), round_cents(monthly_price))
    return {"discount": discount, "finalPrice": round_cents(monthly_price) - discount}


def get_pricing_info(payload):
    """Catalog view for pricing pages: tiers with their band table and starting price"""
    catalog = _as_payload(payload)
    starting = tier_starting_prices(catalog)
    tiers = []
    for tier in catalog.active_tiers():
        tiers.append({
            "id": tier.id,
            "name": tier.name,
            "description": tier.description,
            "examples": list(tier.examples),
            "features": [f.to_dict() for f in tier.features],
            "fromPrice": money_to_json(starting[tier.id]),
            "bands": [
                {"usageBandId": row.usage_band_id, "price": money_to_json(row.usage_adjusted_price)}
                for row in price_table(tier.id, catalog)
            ],
        })
    return {
        "tiers": tiers,
        "usageBands": [
            {"id": b.id, "label": b.label, "multiplier": float(b.multiplier)}
            for b in catalog.usage_bands
        ],
        "addOns": [a.to_dict() for a in catalog.addons if a.active],
        "locations": [loc.to_dict() for loc in catalog.locations if loc.active],
    }
