from datetime import datetime

from pymongo import ASCENDING

from pricing_engine.db import get_db


class CatalogCollection:
    """Live, editable catalog rows keyed by their slug ``id``.

    Rows are never hard-deleted here: snapshots embed copies, and a row that
    customers were quoted against is deactivated instead.
    """

    collection_name = None
    row_type = None
    sort = [("id", ASCENDING)]

    def __init__(self, db=None):
        self.collection = (db if db is not None else get_db())[self.collection_name]

    def ensure_indexes(self):
        return self.collection.create_index("id", unique=True)

    def upsert_row(self, row_data):
        """Create or update a row; raises InvalidCatalog for rows that cannot be priced"""
        row = dict(row_data)
        row.pop("_id", None)
        row.pop("created_at", None)
        # parse once so bad numbers never reach the live table
        parsed = self.row_type.from_row(row)
        row["id"] = parsed.id
        self._check_row(parsed)

        now = datetime.now()
        row["updated_at"] = now
        self.collection.update_one(
            {"id": parsed.id},
            {"$set": row, "$setOnInsert": {"created_at": now}},
            upsert=True,
        )
        return self.get_row(parsed.id)

    def _check_row(self, parsed):
        """Hook for cross-row checks in subclasses"""

    def get_row(self, row_id):
        return self.collection.find_one({"id": row_id}, {"_id": 0})

    def get_all_rows(self, include_inactive=True):
        query = {} if include_inactive else {"active": {"$ne": False}}
        return list(self.collection.find(query, {"_id": 0}).sort(self.sort))

    def deactivate_row(self, row_id):
        return self.collection.update_one(
            {"id": row_id},
            {"$set": {"active": False, "updated_at": datetime.now()}}
        )

    def activate_row(self, row_id):
        return self.collection.update_one(
            {"id": row_id},
            {"$set": {"active": True, "updated_at": datetime.now()}}
        )
