from datetime import datetime

from pricing_engine.catalog import PricingAssumptions
from pricing_engine.db import get_db

ASSUMPTIONS_ID = "global"


class AssumptionsCollection:
    """Single row of global cost assumptions for margin analysis"""

    def __init__(self, db=None):
        self.collection = (db if db is not None else get_db())["pricing_assumptions"]

    def get_assumptions(self):
        return self.collection.find_one({"id": ASSUMPTIONS_ID}, {"_id": 0})

    def save_assumptions(self, assumptions_data):
        """
        Merge the given fields into the existing row (or create it).
        Fields that are not sent keep their stored value.
        """
        current = self.get_assumptions() or {}
        merged = {name: current.get(name) for name in PricingAssumptions.FIELDS}
        for name in PricingAssumptions.FIELDS:
            if name in assumptions_data:
                merged[name] = assumptions_data[name]
        # raises InvalidCatalog for negative or non-numeric values
        PricingAssumptions.from_row(merged)

        merged["id"] = ASSUMPTIONS_ID
        merged["updated_at"] = datetime.now()
        self.collection.update_one({"id": ASSUMPTIONS_ID}, {"$set": merged}, upsert=True)
        return self.get_assumptions()
