from datetime import date, datetime
from decimal import Decimal

from bson import ObjectId


def serialize_document(value):
    """Make a MongoDB document safe for jsonify (ObjectId, datetimes, Decimals)"""
    if isinstance(value, dict):
        document = {}
        for key, item in value.items():
            if key == "_id":
                document.setdefault("id", str(item))
                continue
            document[key] = serialize_document(item)
        return document
    if isinstance(value, (list, tuple)):
        return [serialize_document(item) for item in value]
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value
