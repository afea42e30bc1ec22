#!/usr/bin/env python3
"""
Pricing Catalog Seed Script
Creates the pricing collections and indexes, loads the default catalog and
optionally publishes it as the first snapshot.

Usage:
    python seed_pricing_catalog.py            # seed rows and indexes only
    python seed_pricing_catalog.py --publish  # also publish "Initial pricing"
"""

import argparse
import logging
import os
import sys

# Add current directory to Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

logger = logging.getLogger(__name__)


def seed_catalog(db=None, publish_label=None):
    """
    Upsert the default tiers, usage bands, add-ons, locations and assumptions.
    Existing rows with the same id are updated; nothing is deleted.

    Returns the published Snapshot when publish_label is given, else None.
    """
    from mongodb_collections import (
        AddOnCollection, AssumptionsCollection, LocationCollection, OverrideCollection,
        SnapshotCollection, TierCollection, UsageBandCollection, load_catalog_state,
    )
    from pricing_engine import publish_snapshot
    from pricing_engine.defaults import default_catalog_state

    state = default_catalog_state()

    print("📊 Creating indexes...")
    for collection in (TierCollection(db), AddOnCollection(db), LocationCollection(db),
                       UsageBandCollection(db), SnapshotCollection(db), OverrideCollection(db)):
        collection.ensure_indexes()
    print("✅ Indexes ready")

    print("\n🧾 Loading default catalog...")
    tiers = TierCollection(db)
    for row in state["tiers"]:
        tiers.upsert_row(row)
    print(f"  ✅ {len(state['tiers'])} tiers")

    UsageBandCollection(db).replace_bands(state["usage_bands"])
    print(f"  ✅ {len(state['usage_bands'])} usage bands")

    addons = AddOnCollection(db)
    for row in state["addons"]:
        addons.upsert_row(row)
    print(f"  ✅ {len(state['addons'])} add-ons")

    locations = LocationCollection(db)
    for row in state["locations"]:
        locations.upsert_row(row)
    print(f"  ✅ {len(state['locations'])} locations")

    AssumptionsCollection(db).save_assumptions(state["assumptions"])
    print("  ✅ cost assumptions")

    if not publish_label:
        return None

    print(f"\n🚀 Publishing snapshot '{publish_label}'...")
    snapshot = publish_snapshot(
        publish_label,
        load_catalog_state(db),
        SnapshotCollection(db),
        published_by="seed",
    )
    print(f"✅ Published snapshot {snapshot.id}")
    return snapshot


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    parser = argparse.ArgumentParser(description="Seed the pricing catalog")
    parser.add_argument("--publish", action="store_true", help="publish the seeded catalog as a snapshot")
    parser.add_argument("--label", default="Initial pricing", help="snapshot label used with --publish")
    args = parser.parse_args()

    try:
        print("🚀 Starting pricing catalog seed...")
        seed_catalog(publish_label=args.label if args.publish else None)
        print("\n🎉 Pricing catalog is ready")
        return 0
    except Exception as e:
        logger.exception("Seeding failed")
        print(f"❌ Error seeding pricing catalog: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
