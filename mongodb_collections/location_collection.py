from pymongo import ASCENDING

from pricing_engine.catalog import Location, OWN_STORAGE_SLUG
from pricing_engine.errors import InvalidCatalog
from .catalog_collection import CatalogCollection


class LocationCollection(CatalogCollection):
    """Hangar locations and their monthly hangar cost"""

    collection_name = "pricing_locations"
    row_type = Location
    sort = [("name", ASCENDING)]

    def ensure_indexes(self):
        super().ensure_indexes()
        return self.collection.create_index("slug", unique=True)

    def _check_row(self, parsed):
        clash = self.collection.find_one({"slug": parsed.slug, "id": {"$ne": parsed.id}})
        if clash:
            raise InvalidCatalog(f"Location slug {parsed.slug!r} is already used by {clash['id']!r}")

    def get_by_slug(self, slug):
        return self.collection.find_one({"slug": slug}, {"_id": 0})

    def get_hangar_partners(self):
        """Active locations customers can rent, without the own-storage option"""
        return list(self.collection.find(
            {"active": {"$ne": False}, "slug": {"$ne": OWN_STORAGE_SLUG}},
            {"_id": 0}
        ).sort(self.sort))
