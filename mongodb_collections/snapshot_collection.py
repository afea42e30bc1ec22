from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING

from pricing_engine.db import get_db


class SnapshotCollection:
    """Published pricing snapshots. Insert and read only: a snapshot is never updated or deleted."""

    def __init__(self, db=None):
        self.collection = (db if db is not None else get_db())["pricing_snapshots"]

    def ensure_indexes(self):
        return self.collection.create_index([("published_at", DESCENDING)])

    def insert_snapshot(self, snapshot_data):
        """Single atomic insert; returns the new snapshot id as a string"""
        result = self.collection.insert_one(snapshot_data)
        return str(result.inserted_id)

    def get_latest_snapshot(self):
        """Snapshot with the greatest published_at (ties go to the later insert)"""
        cursor = self.collection.find({}).sort([("published_at", DESCENDING), ("_id", DESCENDING)]).limit(1)
        for document in cursor:
            return self._with_id(document)
        return None

    def get_snapshot_by_id(self, snapshot_id):
        try:
            document = self.collection.find_one({"_id": ObjectId(snapshot_id)})
        except (InvalidId, TypeError):
            return None
        return self._with_id(document) if document else None

    def get_all_snapshots(self, limit=50):
        """Snapshot history without payloads"""
        cursor = self.collection.find({}, {"payload": 0}).sort([("published_at", DESCENDING), ("_id", DESCENDING)]).limit(limit)
        return [self._with_id(document) for document in cursor]

    def _with_id(self, document):
        document["id"] = str(document.pop("_id"))
        return document
