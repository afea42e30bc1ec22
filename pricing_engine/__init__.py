# Pricing engine: catalog types, monthly price calculator, overrides and snapshots
from .catalog import (
    AddOn, AddOnPricing, CatalogPayload, Location, PricingAssumptions,
    Tier, TierFeature, UsageBand, OWN_STORAGE_SLUG,
)
from .errors import InvalidCatalog, InvalidOverride, MissingInput, NotFound, PricingError
from .pricing_logic import (
    PriceBreakdown, calculate_monthly_price, calculate_multi_aircraft_discount,
    get_pricing_info, price_table, price_without_hangar, recommend_tier,
    recommend_usage_band, tier_starting_prices,
)
from .overrides import AircraftPricingOverride, AircraftPrice, resolve_aircraft_price
from .cost_analysis import analyze_margin
from .snapshots import Snapshot, latest_snapshot, publish_snapshot

__all__ = [
    'AddOn', 'AddOnPricing', 'CatalogPayload', 'Location', 'PricingAssumptions',
    'Tier', 'TierFeature', 'UsageBand', 'OWN_STORAGE_SLUG',
    'InvalidCatalog', 'InvalidOverride', 'MissingInput', 'NotFound', 'PricingError',
    'PriceBreakdown', 'calculate_monthly_price', 'calculate_multi_aircraft_discount',
    'get_pricing_info', 'price_table', 'price_without_hangar', 'recommend_tier',
    'recommend_usage_band', 'tier_starting_prices',
    'AircraftPricingOverride', 'AircraftPrice', 'resolve_aircraft_price',
    'analyze_margin',
    'Snapshot', 'latest_snapshot', 'publish_snapshot',
]
