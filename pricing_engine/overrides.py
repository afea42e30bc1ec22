"""
Per-aircraft price overrides.

Negotiated and legacy prices live in ``aircraft_pricing_overrides`` rows. The
calculator never sees them: callers compute the normal breakdown first and
then substitute the override here.
"""

import logging
from dataclasses import dataclass

from .catalog import CatalogPayload
from .errors import InvalidCatalog, InvalidOverride, NotFound
from .money import money_to_json, to_decimal
from .pricing_logic import calculate_monthly_price

logger = logging.getLogger(__name__)

SOURCE_COMPUTED = "computed"
SOURCE_OVERRIDE = "override"


@dataclass(frozen=True)
class AircraftPricingOverride:
    aircraft_id: str
    override_monthly: object = None
    override_hangar_cost: object = None
    location_id: str = None
    class_id: str = None
    notes: str = ""

    @classmethod
    def from_row(cls, row):
        if not row.get("aircraft_id"):
            raise InvalidCatalog("Override row is missing 'aircraft_id'")

        def amount(key):
            value = row.get(key)
            if value is None or value == "":
                return None
            try:
                value = to_decimal(value)
            except ValueError as e:
                raise InvalidCatalog(f"Override {row.get('aircraft_id')}: {key} {e}")
            if value < 0:
                raise InvalidCatalog(f"Override {row.get('aircraft_id')}: {key} must be >= 0")
            return value

        return cls(
            aircraft_id=str(row["aircraft_id"]),
            override_monthly=amount("override_monthly"),
            override_hangar_cost=amount("override_hangar_cost"),
            location_id=row.get("location_id") or None,
            class_id=row.get("class_id") or None,
            notes=row.get("notes") or "",
        )

    @property
    def is_empty(self):
        return self.override_monthly is None and self.override_hangar_cost is None

    def applies_to(self, tier_id, location_id, catalog=None):
        """
        Scoped overrides only apply while the aircraft stays on that tier/location.
        ``location_id`` is a resolved location id; the override's own location
        may be stored as an id or a slug, so it is resolved through ``catalog``.
        """
        if self.class_id and self.class_id != tier_id:
            return False
        if self.location_id:
            scoped_location = self.location_id
            if catalog is not None:
                scoped_location = catalog.get_location(self.location_id, include_inactive=True).id
            if scoped_location != location_id:
                return False
        return True


@dataclass(frozen=True)
class AircraftPrice:
    aircraft_id: str
    computed: object
    service_price: object
    hangar_cost: object
    source: str = SOURCE_COMPUTED
    stale_override: bool = False
    stale_reason: str = ""

    @property
    def total(self):
        return self.service_price + self.hangar_cost

    def to_dict(self):
        return {
            "aircraftId": self.aircraft_id,
            "source": self.source,
            "servicePrice": money_to_json(self.service_price),
            "hangarCost": money_to_json(self.hangar_cost),
            "total": money_to_json(self.total),
            "computed": self.computed.to_dict(),
            "staleOverride": self.stale_override,
            "staleReason": self.stale_reason,
        }


def validate_override(override, payload, aircraft_exists=True):
    """Raise InvalidOverride when the override points at something that no longer exists"""
    catalog = CatalogPayload.from_dict(payload)
    if not aircraft_exists:
        raise InvalidOverride(override.aircraft_id, "aircraft no longer exists")
    if override.class_id:
        try:
            catalog.get_tier(override.class_id, include_inactive=True)
        except NotFound:
            raise InvalidOverride(override.aircraft_id, f"tier {override.class_id!r} no longer exists")
    if override.location_id:
        try:
            catalog.get_location(override.location_id, include_inactive=True)
        except NotFound:
            raise InvalidOverride(override.aircraft_id, f"location {override.location_id!r} no longer exists")


def apply_override(breakdown, override):
    """Substitute override amounts into a computed breakdown"""
    service_price = breakdown.service_price
    hangar_cost = breakdown.hangar_cost
    if override.override_monthly is not None:
        service_price = override.override_monthly
    if override.override_hangar_cost is not None:
        hangar_cost = override.override_hangar_cost
    return service_price, hangar_cost


def resolve_aircraft_price(aircraft_id, selection, payload, override=None, aircraft_exists=True):
    """
    Price one aircraft: computed breakdown, replaced by its override when one applies.

    ``selection`` holds tier_id, usage_band_id, addon_ids and location_id.
    A stale override does not fail the quote; the computed price is returned
    and the result is flagged so an administrator can review the override.
    """
    catalog = CatalogPayload.from_dict(payload)
    computed = calculate_monthly_price(
        selection.get("tier_id"),
        selection.get("usage_band_id"),
        selection.get("addon_ids") or [],
        selection.get("location_id"),
        catalog,
        include_inactive=selection.get("include_inactive", False),
    )
    result = AircraftPrice(
        aircraft_id=aircraft_id,
        computed=computed,
        service_price=computed.service_price,
        hangar_cost=computed.hangar_cost,
    )
    if override is None:
        return result
    if isinstance(override, dict):
        override = AircraftPricingOverride.from_row(override)

    try:
        validate_override(override, catalog, aircraft_exists=aircraft_exists)
    except InvalidOverride as e:
        logger.warning("Falling back to computed price: %s", e)
        return AircraftPrice(
            aircraft_id=aircraft_id,
            computed=computed,
            service_price=computed.service_price,
            hangar_cost=computed.hangar_cost,
            stale_override=True,
            stale_reason=e.reason,
        )

    if override.is_empty or not override.applies_to(computed.tier_id, computed.location_id, catalog):
        return result

    service_price, hangar_cost = apply_override(computed, override)
    return AircraftPrice(
        aircraft_id=aircraft_id,
        computed=computed,
        service_price=service_price,
        hangar_cost=hangar_cost,
        source=SOURCE_OVERRIDE,
    )
