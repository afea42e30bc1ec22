"""
Snapshot publishing.

A snapshot is a frozen copy of the whole catalog (tiers, usage bands, add-ons,
locations, assumptions). Public pricing reads only the latest snapshot, so a
customer's quote does not move while an administrator edits the live rows.

The store is anything with ``insert_snapshot(document)`` returning the new id
and ``get_latest_snapshot()`` returning a document or None; in the app that is
``mongodb_collections.SnapshotCollection``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from .catalog import CatalogPayload
from .errors import InvalidCatalog, MissingInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    id: str
    label: str
    published_at: datetime
    payload: CatalogPayload
    published_by: str = None

    @classmethod
    def from_document(cls, document):
        if document is None:
            return None
        snapshot_id = document.get("id") or document.get("_id")
        return cls(
            id=str(snapshot_id),
            label=document.get("label", ""),
            published_at=document.get("published_at"),
            payload=CatalogPayload.from_dict(document.get("payload")),
            published_by=document.get("published_by"),
        )

    def to_dict(self):
        published_at = self.published_at
        if isinstance(published_at, datetime):
            published_at = published_at.isoformat()
        return {
            "id": self.id,
            "label": self.label,
            "published_at": published_at,
            "published_by": self.published_by,
            "payload": self.payload.to_dict(),
        }


def _retained_ids(previous, catalog):
    """Rows referenced by the previous snapshot may be deactivated, never removed"""
    problems = []
    tier_ids = {t.id for t in catalog.tiers}
    for tier in previous.payload.tiers:
        if tier.id not in tier_ids:
            problems.append(f"Tier {tier.id!r} is referenced by snapshot {previous.id} and cannot be removed; deactivate it instead")
    location_ids = {loc.id for loc in catalog.locations}
    for location in previous.payload.locations:
        if location.id not in location_ids:
            problems.append(f"Location {location.id!r} is referenced by snapshot {previous.id} and cannot be removed; deactivate it instead")
    return problems


def build_snapshot_document(label, catalog_state, published_at=None, published_by=None):
    """Validate the live catalog and build the document to insert"""
    if not label or not str(label).strip():
        raise MissingInput("snapshot label")
    catalog = CatalogPayload.from_dict(catalog_state)
    if not catalog.active_tiers():
        raise InvalidCatalog("At least one active tier is required to publish")
    return {
        "label": str(label).strip(),
        "published_at": published_at or datetime.now(timezone.utc),
        "published_by": published_by,
        # to_dict builds fresh lists/dicts, so later edits to catalog_state cannot reach it
        "payload": catalog.to_dict(),
    }


def publish_snapshot(label, catalog_state, store, published_at=None, published_by=None):
    """
    Publish the current catalog as a new immutable snapshot.

    Exactly one record is inserted. If validation or the insert fails nothing
    is written and readers keep seeing the previous snapshot.

    Raises:
        MissingInput: label is empty
        InvalidCatalog: catalog rows break a catalog rule
    """
    document = build_snapshot_document(label, catalog_state, published_at, published_by)

    previous = latest_snapshot(store)
    if previous is not None:
        problems = _retained_ids(previous, CatalogPayload.from_dict(document["payload"]))
        if problems:
            raise InvalidCatalog(problems)

    snapshot_id = store.insert_snapshot(document)
    logger.info("Published pricing snapshot %s (%s)", snapshot_id, document["label"])
    return Snapshot(
        id=str(snapshot_id),
        label=document["label"],
        published_at=document["published_at"],
        payload=CatalogPayload.from_dict(document["payload"]),
        published_by=published_by,
    )


def latest_snapshot(store):
    return Snapshot.from_document(store.get_latest_snapshot())
