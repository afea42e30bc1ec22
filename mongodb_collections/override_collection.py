from datetime import datetime

from pricing_engine.db import get_db
from pricing_engine.overrides import AircraftPricingOverride


class OverrideCollection:
    """Per-aircraft negotiated or legacy pricing (one row per aircraft)"""

    def __init__(self, db=None):
        self.collection = (db if db is not None else get_db())["aircraft_pricing_overrides"]

    def ensure_indexes(self):
        return self.collection.create_index("aircraft_id", unique=True)

    def upsert_override(self, override_data):
        row = dict(override_data)
        row.pop("_id", None)
        row.pop("created_at", None)
        override = AircraftPricingOverride.from_row(row)
        row["aircraft_id"] = override.aircraft_id
        # a saved edit is a fresh review, clear any stale flag
        row["stale"] = False
        row["stale_reason"] = ""

        now = datetime.now()
        row["updated_at"] = now
        self.collection.update_one(
            {"aircraft_id": override.aircraft_id},
            {"$set": row, "$setOnInsert": {"created_at": now}},
            upsert=True,
        )
        return self.get_override(override.aircraft_id)

    def get_override(self, aircraft_id):
        return self.collection.find_one({"aircraft_id": aircraft_id}, {"_id": 0})

    def get_all_overrides(self, stale_only=False):
        query = {"stale": True} if stale_only else {}
        return list(self.collection.find(query, {"_id": 0}).sort("aircraft_id", 1))

    def mark_stale(self, aircraft_id, reason):
        """Flag an override for administrator review"""
        return self.collection.update_one(
            {"aircraft_id": aircraft_id},
            {"$set": {"stale": True, "stale_reason": reason, "updated_at": datetime.now()}}
        )

    def delete_override(self, aircraft_id):
        return self.collection.delete_one({"aircraft_id": aircraft_id})
