"""
Catalog types for the pricing engine.

Rows arrive as plain dicts (from MongoDB or from a snapshot payload) and are
parsed into frozen dataclasses, so a parsed payload cannot be changed after
the fact. ``CatalogPayload.to_dict`` produces the JSON-safe structure stored
inside a published snapshot.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from .errors import InvalidCatalog, NotFound
from .money import to_decimal

OWN_STORAGE_SLUG = "none"

ADDON_PRICING_TYPES = ("flat", "percent_of_service", "per_flight_hour", "per_tier")


def _number(row, key, kind, default=None, minimum=None):
    try:
        value = to_decimal(row.get(key), default)
    except ValueError as e:
        raise InvalidCatalog(f"{kind} {row.get('id')!r}: {key} {e}")
    if minimum is not None and value < minimum:
        raise InvalidCatalog(f"{kind} {row.get('id')!r}: {key} must be >= {minimum}")
    return value


def _optional_number(row, key, kind, minimum=None):
    if row.get(key) is None or row.get(key) == "":
        return None
    return _number(row, key, kind, minimum=minimum)


def _require_id(row, kind, key="id"):
    ref = row.get(key)
    if ref is None or str(ref).strip() == "":
        raise InvalidCatalog(f"{kind} row is missing '{key}'")
    return str(ref).strip()


def _plain(value):
    """Decimal -> str for JSON payloads, keeping full precision"""
    if isinstance(value, Decimal):
        return str(value)
    return value


@dataclass(frozen=True)
class TierFeature:
    name: str
    description: str = ""
    included: bool = True

    @classmethod
    def from_row(cls, row):
        if isinstance(row, str):
            return cls(name=row)
        if not isinstance(row, dict):
            raise InvalidCatalog(f"Tier feature must be a name or a mapping, got {type(row).__name__}")
        return cls(
            name=str(row.get("name", "")),
            description=row.get("description") or "",
            included=bool(row.get("included", True)),
        )

    def to_dict(self):
        return {"name": self.name, "description": self.description, "included": self.included}


@dataclass(frozen=True)
class Tier:
    id: str
    name: str
    base_monthly: Decimal
    description: str = ""
    features: tuple = ()
    examples: tuple = ()
    sort_order: int = 0
    active: bool = True
    # make/model families for recommendations, e.g. "citation", "cirrus"
    match_patterns: tuple = ()
    # internal cost profile, only read by margin analysis
    labor_hours: Decimal = Decimal("0")
    avionics_db: Decimal = None
    consumables: Decimal = Decimal("0")

    @classmethod
    def from_row(cls, row):
        tier_id = _require_id(row, "Tier")
        try:
            sort_order = int(row.get("sort_order") or 0)
        except (TypeError, ValueError):
            raise InvalidCatalog(f"Tier {tier_id!r}: sort_order must be a whole number")
        return cls(
            id=tier_id,
            name=row.get("name") or tier_id,
            base_monthly=_number(row, "base_monthly", "Tier", minimum=0),
            description=row.get("description") or "",
            features=tuple(TierFeature.from_row(f) for f in (row.get("features") or [])),
            examples=tuple(str(e) for e in (row.get("examples") or [])),
            sort_order=sort_order,
            active=bool(row.get("active", True)),
            match_patterns=tuple(str(p).lower() for p in (row.get("match_patterns") or []) if str(p).strip()),
            labor_hours=_number(row, "labor_hours", "Tier", default="0", minimum=0),
            avionics_db=_optional_number(row, "avionics_db", "Tier", minimum=0),
            consumables=_number(row, "consumables", "Tier", default="0", minimum=0),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "base_monthly": _plain(self.base_monthly),
            "description": self.description,
            "features": [f.to_dict() for f in self.features],
            "examples": list(self.examples),
            "sort_order": self.sort_order,
            "active": self.active,
            "match_patterns": list(self.match_patterns),
            "labor_hours": _plain(self.labor_hours),
            "avionics_db": _plain(self.avionics_db),
            "consumables": _plain(self.consumables),
        }


@dataclass(frozen=True)
class UsageBand:
    id: str
    min_hours: Decimal
    max_hours: Decimal = None
    multiplier: Decimal = Decimal("1")
    label: str = ""
    avg_hours: Decimal = None

    @classmethod
    def from_row(cls, row):
        band_id = _require_id(row, "Usage band")
        band = cls(
            id=band_id,
            min_hours=_number(row, "min_hours", "Usage band", default="0", minimum=0),
            max_hours=_optional_number(row, "max_hours", "Usage band"),
            multiplier=_number(row, "multiplier", "Usage band", minimum=0),
            label=row.get("label") or band_id,
            avg_hours=_optional_number(row, "avg_hours", "Usage band", minimum=0),
        )
        if band.max_hours is not None and band.max_hours <= band.min_hours:
            raise InvalidCatalog(f"Usage band {band_id!r}: max_hours must exceed min_hours")
        return band

    def contains(self, hours):
        hours = to_decimal(hours)
        if hours < self.min_hours:
            return False
        return self.max_hours is None or hours < self.max_hours

    @property
    def representative_hours(self):
        """Hours used by per-flight-hour add-ons: avg_hours, else the band midpoint"""
        if self.avg_hours is not None:
            return self.avg_hours
        if self.max_hours is None:
            return self.min_hours
        return (self.min_hours + self.max_hours) / 2

    def to_dict(self):
        return {
            "id": self.id,
            "min_hours": _plain(self.min_hours),
            "max_hours": _plain(self.max_hours),
            "multiplier": _plain(self.multiplier),
            "label": self.label,
            "avg_hours": _plain(self.avg_hours),
        }


@dataclass(frozen=True)
class AddOnPricing:
    """Computed-cost descriptor; ``flat`` is the plain monthly price"""
    type: str = "flat"
    price: Decimal = Decimal("0")
    percent: Decimal = Decimal("0")
    rate: Decimal = Decimal("0")
    tier_prices: tuple = ()
    default: Decimal = None

    @classmethod
    def from_row(cls, row):
        descriptor = row.get("pricing") or {}
        pricing_type = descriptor.get("type") or "flat"
        kind = "Add-on"
        if pricing_type not in ADDON_PRICING_TYPES:
            raise InvalidCatalog(f"Add-on {row.get('id')!r}: unknown pricing type {pricing_type!r}")
        if pricing_type == "flat":
            return cls(price=_number(row, "price", kind, default="0", minimum=0))
        scoped = dict(descriptor, id=row.get("id"))
        if pricing_type == "percent_of_service":
            return cls(type=pricing_type, percent=_number(scoped, "percent", kind, minimum=0))
        if pricing_type == "per_flight_hour":
            return cls(type=pricing_type, rate=_number(scoped, "rate", kind, minimum=0))
        prices = []
        for tier_id, amount in sorted((descriptor.get("prices") or {}).items()):
            prices.append((str(tier_id), _number({"id": row.get("id"), "price": amount}, "price", kind, minimum=0)))
        return cls(
            type=pricing_type,
            tier_prices=tuple(prices),
            default=_optional_number(scoped, "default", kind, minimum=0),
        )

    def to_dict(self):
        if self.type == "percent_of_service":
            return {"type": self.type, "percent": _plain(self.percent)}
        if self.type == "per_flight_hour":
            return {"type": self.type, "rate": _plain(self.rate)}
        if self.type == "per_tier":
            return {
                "type": self.type,
                "prices": {tier_id: _plain(amount) for tier_id, amount in self.tier_prices},
                "default": _plain(self.default),
            }
        return {"type": "flat"}


@dataclass(frozen=True)
class AddOn:
    id: str
    name: str
    pricing: AddOnPricing = field(default_factory=AddOnPricing)
    category: str = ""
    description: str = ""
    applicable_tiers: tuple = None
    active: bool = True

    @classmethod
    def from_row(cls, row):
        addon_id = _require_id(row, "Add-on")
        applicable = row.get("applicable_tiers")
        return cls(
            id=addon_id,
            name=row.get("name") or addon_id,
            pricing=AddOnPricing.from_row(row),
            category=row.get("category") or "",
            description=row.get("description") or "",
            applicable_tiers=tuple(str(t) for t in applicable) if applicable else None,
            active=bool(row.get("active", True)),
        )

    @property
    def price(self):
        """Flat monthly price (0 for computed add-ons)"""
        return self.pricing.price

    def applies_to(self, tier_id):
        return self.applicable_tiers is None or tier_id in self.applicable_tiers

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "price": _plain(self.price),
            "pricing": self.pricing.to_dict(),
            "category": self.category,
            "description": self.description,
            "applicable_tiers": list(self.applicable_tiers) if self.applicable_tiers is not None else None,
            "active": self.active,
        }


@dataclass(frozen=True)
class Location:
    id: str
    name: str
    slug: str
    hangar_cost_monthly: Decimal = Decimal("0")
    description: str = ""
    amenities: tuple = ()
    address: str = ""
    active: bool = True

    @classmethod
    def from_row(cls, row):
        location_id = _require_id(row, "Location")
        slug = str(row.get("slug") or location_id).strip()
        hangar_cost = _number(row, "hangar_cost_monthly", "Location", default="0", minimum=0)
        if slug == OWN_STORAGE_SLUG:
            hangar_cost = Decimal("0")
        return cls(
            id=location_id,
            name=row.get("name") or slug,
            slug=slug,
            hangar_cost_monthly=hangar_cost,
            description=row.get("description") or "",
            amenities=tuple(str(a) for a in (row.get("amenities") or [])),
            address=row.get("address") or "",
            active=bool(row.get("active", True)),
        )

    @property
    def is_own_storage(self):
        return self.slug == OWN_STORAGE_SLUG

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "hangar_cost_monthly": _plain(self.hangar_cost_monthly),
            "description": self.description,
            "amenities": list(self.amenities),
            "address": self.address,
            "active": self.active,
        }


@dataclass(frozen=True)
class PricingAssumptions:
    labor_rate: Decimal = Decimal("0")
    card_fee_pct: Decimal = Decimal("0")
    cfi_allocation: Decimal = Decimal("0")
    cleaning_supplies: Decimal = Decimal("0")
    overhead_per_ac: Decimal = Decimal("0")
    avionics_db_per_ac: Decimal = Decimal("0")

    FIELDS = (
        "labor_rate", "card_fee_pct", "cfi_allocation",
        "cleaning_supplies", "overhead_per_ac", "avionics_db_per_ac",
    )

    @classmethod
    def from_row(cls, row):
        row = dict(row or {}, id="assumptions")
        return cls(**{name: _number(row, name, "Assumptions", default="0", minimum=0) for name in cls.FIELDS})

    def to_dict(self):
        return {name: _plain(getattr(self, name)) for name in self.FIELDS}


def _unique(rows, attr, kind, problems):
    seen = set()
    for row in rows:
        value = getattr(row, attr)
        if value in seen:
            problems.append(f"Duplicate {kind} {attr}: {value!r}")
        seen.add(value)


def check_band_coverage(bands):
    """Bands must tile [0, inf) with no gaps and no overlaps"""
    problems = []
    if not bands:
        return ["At least one usage band is required"]
    ordered = sorted(bands, key=lambda b: b.min_hours)
    if ordered[0].min_hours != 0:
        problems.append("Usage bands must start at 0 hours")
    for lower, upper in zip(ordered, ordered[1:]):
        if lower.max_hours is None:
            problems.append(f"Usage band {lower.id!r} is unbounded but is followed by {upper.id!r}")
        elif lower.max_hours < upper.min_hours:
            problems.append(f"Gap between usage bands {lower.id!r} and {upper.id!r}")
        elif lower.max_hours > upper.min_hours:
            problems.append(f"Usage bands {lower.id!r} and {upper.id!r} overlap")
    if ordered[-1].max_hours is not None:
        problems.append(f"Last usage band {ordered[-1].id!r} must be unbounded")
    return problems


@dataclass(frozen=True)
class CatalogPayload:
    """Everything the calculator needs, frozen"""
    tiers: tuple = ()
    usage_bands: tuple = ()
    addons: tuple = ()
    locations: tuple = ()
    assumptions: PricingAssumptions = field(default_factory=PricingAssumptions)

    @classmethod
    def from_dict(cls, data):
        if isinstance(data, CatalogPayload):
            return data
        if data is None:
            raise InvalidCatalog("Pricing payload is empty")
        if not isinstance(data, dict):
            raise InvalidCatalog(f"Pricing payload must be a mapping, got {type(data).__name__}")
        payload = cls(
            tiers=tuple(sorted(
                (Tier.from_row(r) for r in data.get("tiers") or []),
                key=lambda t: (t.sort_order, t.id),
            )),
            usage_bands=tuple(sorted(
                (UsageBand.from_row(r) for r in data.get("usage_bands") or []),
                key=lambda b: b.min_hours,
            )),
            addons=tuple(AddOn.from_row(r) for r in data.get("addons") or []),
            locations=tuple(Location.from_row(r) for r in data.get("locations") or []),
            assumptions=PricingAssumptions.from_row(data.get("assumptions")),
        )
        problems = payload.problems()
        if problems:
            raise InvalidCatalog(problems)
        return payload

    def problems(self):
        problems = []
        _unique(self.tiers, "id", "tier", problems)
        _unique(self.usage_bands, "id", "usage band", problems)
        _unique(self.addons, "id", "add-on", problems)
        _unique(self.locations, "id", "location", problems)
        _unique(self.locations, "slug", "location", problems)
        problems.extend(check_band_coverage(self.usage_bands))
        return problems

    def get_tier(self, tier_id, include_inactive=False):
        for tier in self.tiers:
            if tier.id == tier_id and (tier.active or include_inactive):
                return tier
        raise NotFound("tier", tier_id)

    def get_band(self, band_id):
        for band in self.usage_bands:
            if band.id == band_id:
                return band
        raise NotFound("usage band", band_id)

    def find_addon(self, addon_id):
        for addon in self.addons:
            if addon.id == addon_id:
                return addon
        return None

    def get_location(self, ref, include_inactive=False):
        """Resolve a location by id, falling back to slug"""
        for location in self.locations:
            if location.id == ref and (location.active or include_inactive):
                return location
        for location in self.locations:
            if location.slug == ref and (location.active or include_inactive):
                return location
        raise NotFound("location", ref)

    def active_tiers(self):
        return [t for t in self.tiers if t.active]

    def hangar_partners(self):
        return [loc for loc in self.locations if loc.active and not loc.is_own_storage]

    def to_dict(self):
        return {
            "tiers": [t.to_dict() for t in self.tiers],
            "usage_bands": [b.to_dict() for b in self.usage_bands],
            "addons": [a.to_dict() for a in self.addons],
            "locations": [loc.to_dict() for loc in self.locations],
            "assumptions": self.assumptions.to_dict(),
        }
