from datetime import datetime

from bson import ObjectId
from bson.errors import InvalidId

from pricing_engine.db import get_db

QUOTE_STATUSES = ("draft", "sent", "accepted", "rejected")


class QuoteCollection:
    """Handles quote-related MongoDB operations"""

    def __init__(self, db=None):
        self.collection = (db if db is not None else get_db())["quotes"]

    def create_quote(self, quote_data):
        """Create a new quote with validation"""
        if not self._validate_quote_data(quote_data):
            raise ValueError("Invalid quote data")

        quote_data["status"] = "draft"
        quote_data["created_at"] = datetime.now()
        quote_data["updated_at"] = datetime.now()

        return self.collection.insert_one(quote_data)

    def get_quote_by_id(self, quote_id):
        """Get quote by MongoDB ObjectId"""
        try:
            return self.collection.find_one({"_id": ObjectId(quote_id)})
        except (InvalidId, TypeError):
            return None

    def get_quotes_by_customer(self, customer_email, limit=50):
        """Get all quotes for a specific customer"""
        return list(self.collection.find(
            {"customer.email": customer_email}
        ).sort("created_at", -1).limit(limit))

    def get_quotes_by_snapshot(self, snapshot_id, limit=100):
        return list(self.collection.find(
            {"snapshot_id": snapshot_id}
        ).sort("created_at", -1).limit(limit))

    def update_quote_status(self, quote_id, new_status, notes=""):
        """Update quote status (draft -> sent -> accepted -> rejected)"""
        if new_status not in QUOTE_STATUSES:
            raise ValueError(f"Invalid quote status: {new_status}")
        update_data = {
            "status": new_status,
            "updated_at": datetime.now()
        }
        if notes:
            update_data["notes"] = notes

        try:
            return self.collection.update_one(
                {"_id": ObjectId(quote_id)},
                {"$set": update_data}
            )
        except (InvalidId, TypeError):
            return None

    def _validate_quote_data(self, data):
        """Validate quote data before saving"""
        required_fields = ["customer", "selection", "snapshot_id", "breakdown"]
        return all(field in data for field in required_fields)
