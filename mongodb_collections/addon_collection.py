from pymongo import ASCENDING

from pricing_engine.catalog import AddOn
from .catalog_collection import CatalogCollection


class AddOnCollection(CatalogCollection):
    """Optional services priced on top of the tier"""

    collection_name = "pricing_addons"
    row_type = AddOn
    sort = [("category", ASCENDING), ("name", ASCENDING)]
