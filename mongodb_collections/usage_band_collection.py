from datetime import datetime

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from pricing_engine.catalog import UsageBand, check_band_coverage
from pricing_engine.errors import InvalidCatalog
from .catalog_collection import CatalogCollection


class UsageBandCollection(CatalogCollection):
    """Monthly flight-hour bands and their multipliers"""

    collection_name = "pricing_usage_bands"
    row_type = UsageBand
    sort = [("min_hours", ASCENDING)]

    def replace_bands(self, bands):
        """
        Swap the full band table; the new bands must cover [0, inf) without
        overlaps and with unique ids. If the insert fails the previous table
        is put back.
        """
        rows = []
        parsed = []
        problems = []
        seen = set()
        now = datetime.now()
        for band in bands:
            row = {k: v for k, v in band.items() if k not in ("_id", "created_at", "updated_at")}
            band_row = UsageBand.from_row(row)
            if band_row.id in seen:
                problems.append(f"Duplicate usage band id: {band_row.id!r}")
            seen.add(band_row.id)
            parsed.append(band_row)
            row["id"] = band_row.id
            rows.append(dict(row, created_at=now, updated_at=now))
        problems.extend(check_band_coverage(parsed))
        if problems:
            raise InvalidCatalog(problems)

        previous = list(self.collection.find({}))
        self.collection.delete_many({})
        try:
            self.collection.insert_many(rows)
        except PyMongoError:
            self.collection.delete_many({})
            if previous:
                self.collection.insert_many(previous)
            raise
        return self.get_all_rows()
