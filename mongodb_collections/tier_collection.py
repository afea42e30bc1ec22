from pymongo import ASCENDING

from pricing_engine.catalog import Tier
from .catalog_collection import CatalogCollection


class TierCollection(CatalogCollection):
    """Service tiers (pricing classes)"""

    collection_name = "pricing_tiers"
    row_type = Tier
    sort = [("sort_order", ASCENDING), ("id", ASCENDING)]
