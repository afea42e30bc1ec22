# MongoDB Collections Package
# All MongoDB collection operations in one flat folder

from .tier_collection import TierCollection
from .usage_band_collection import UsageBandCollection
from .addon_collection import AddOnCollection
from .location_collection import LocationCollection
from .assumptions_collection import AssumptionsCollection
from .snapshot_collection import SnapshotCollection
from .override_collection import OverrideCollection
from .quote_collection import QuoteCollection


def load_catalog_state(db=None):
    """Read the live catalog (including inactive rows) in snapshot payload shape"""
    return {
        "tiers": TierCollection(db).get_all_rows(),
        "usage_bands": UsageBandCollection(db).get_all_rows(),
        "addons": AddOnCollection(db).get_all_rows(),
        "locations": LocationCollection(db).get_all_rows(),
        "assumptions": AssumptionsCollection(db).get_assumptions() or {},
    }


__all__ = [
    'TierCollection',
    'UsageBandCollection',
    'AddOnCollection',
    'LocationCollection',
    'AssumptionsCollection',
    'SnapshotCollection',
    'OverrideCollection',
    'QuoteCollection',
    'load_catalog_state',
]
