import logging

from flask import Blueprint, g, jsonify, request

from mongodb_collections import (
    AddOnCollection, AssumptionsCollection, LocationCollection, OverrideCollection,
    SnapshotCollection, TierCollection, UsageBandCollection, load_catalog_state,
)
from pricing_engine import (
    CatalogPayload, InvalidCatalog, MissingInput, NotFound, analyze_margin,
    calculate_monthly_price, publish_snapshot,
)
from pricing_engine.snapshots import Snapshot
from utils.auth import require_admin
from utils.json_helper import serialize_document

logger = logging.getLogger(__name__)

admin_pricing_bp = Blueprint('admin_pricing', __name__, url_prefix='/api/admin/pricing')

CATALOG_COLLECTIONS = {
    'tiers': TierCollection,
    'addons': AddOnCollection,
    'locations': LocationCollection,
}


def _catalog_error(e):
    problems = getattr(e, 'problems', [str(e)])
    return jsonify({'success': False, 'message': str(e), 'problems': problems}), 400


@admin_pricing_bp.route('/catalog', methods=['GET'])
@require_admin
def get_live_catalog():
    """Live catalog plus whatever would stop it from being published"""
    try:
        state = load_catalog_state()
        try:
            CatalogPayload.from_dict(state)
            problems = []
        except InvalidCatalog as e:
            problems = e.problems
        return jsonify({'success': True, 'catalog': serialize_document(state), 'problems': problems}), 200
    except Exception as e:
        logger.exception("Failed to load live catalog")
        return jsonify({'success': False, 'message': f'Server error: {str(e)}'}), 500


@admin_pricing_bp.route('/<any(tiers,addons,locations):kind>', methods=['GET'])
@require_admin
def list_catalog_rows(kind):
    try:
        include_inactive = request.args.get('include_inactive', '1') != '0'
        rows = CATALOG_COLLECTIONS[kind]().get_all_rows(include_inactive=include_inactive)
        return jsonify({'success': True, kind: serialize_document(rows), 'count': len(rows)}), 200
    except Exception as e:
        logger.exception("Failed to list %s", kind)
        return jsonify({'success': False, 'message': f'Server error: {str(e)}'}), 500


@admin_pricing_bp.route('/<any(tiers,addons,locations):kind>', methods=['POST'])
@require_admin
def save_catalog_row(kind):
    try:
        data = request.get_json(silent=True)
        if not data:
            return jsonify({'success': False, 'message': 'No data provided'}), 400
        row = CATALOG_COLLECTIONS[kind]().upsert_row(data)
        logger.info("%s saved %s row %s", g.admin_user, kind, row.get('id'))
        return jsonify({'success': True, 'row': serialize_document(row)}), 200
    except InvalidCatalog as e:
        return _catalog_error(e)
    except Exception as e:
        logger.exception("Failed to save %s row", kind)
        return jsonify({'success': False, 'message': f'Server error: {str(e)}'}), 500


@admin_pricing_bp.route('/<any(tiers,addons,locations):kind>/<row_id>/<any(activate,deactivate):action>', methods=['POST'])
@require_admin
def set_catalog_row_active(kind, row_id, action):
    try:
        collection = CATALOG_COLLECTIONS[kind]()
        if action == 'activate':
            result = collection.activate_row(row_id)
        else:
            result = collection.deactivate_row(row_id)
        if result.matched_count == 0:
            return jsonify({'success': False, 'message': f'{kind[:-1].title()} not found'}), 404
        logger.info("%s %sd %s row %s", g.admin_user, action, kind, row_id)
        return jsonify({'success': True, 'row': serialize_document(collection.get_row(row_id))}), 200
    except Exception as e:
        logger.exception("Failed to %s %s row %s", action, kind, row_id)
        return jsonify({'success': False, 'message': f'Server error: {str(e)}'}), 500


@admin_pricing_bp.route('/usage-bands', methods=['GET'])
@require_admin
def list_usage_bands():
    try:
        bands = UsageBandCollection().get_all_rows()
        return jsonify({'success': True, 'usage_bands': serialize_document(bands)}), 200
    except Exception as e:
        return jsonify({'success': False, 'message': f'Server error: {str(e)}'}), 500


@admin_pricing_bp.route('/usage-bands', methods=['PUT'])
@require_admin
def replace_usage_bands():
    """Bands are edited as a whole table so coverage can be checked in one go"""
    try:
        data = request.get_json(silent=True) or {}
        bands = data.get('usage_bands')
        if not isinstance(bands, list):
            return jsonify({'success': False, 'message': 'usage_bands list is required'}), 400
        saved = UsageBandCollection().replace_bands(bands)
        logger.info("%s replaced usage bands (%d rows)", g.admin_user, len(saved))
        return jsonify({'success': True, 'usage_bands': serialize_document(saved)}), 200
    except InvalidCatalog as e:
        return _catalog_error(e)
    except Exception as e:
        logger.exception("Failed to replace usage bands")
        return jsonify({'success': False, 'message': f'Server error: {str(e)}'}), 500


@admin_pricing_bp.route('/assumptions', methods=['GET'])
@require_admin
def get_assumptions():
    try:
        assumptions = AssumptionsCollection().get_assumptions()
        return jsonify({'success': True, 'assumptions': serialize_document(assumptions)}), 200
    except Exception as e:
        return jsonify({'success': False, 'message': f'Server error: {str(e)}'}), 500


@admin_pricing_bp.route('/assumptions', methods=['PUT'])
@require_admin
def save_assumptions():
    try:
        data = request.get_json(silent=True)
        if not data:
            return jsonify({'success': False, 'message': 'No data provided'}), 400
        assumptions = AssumptionsCollection().save_assumptions(data)
        return jsonify({'success': True, 'assumptions': serialize_document(assumptions)}), 200
    except InvalidCatalog as e:
        return _catalog_error(e)
    except Exception as e:
        logger.exception("Failed to save pricing assumptions")
        return jsonify({'success': False, 'message': f'Server error: {str(e)}'}), 500


@admin_pricing_bp.route('/overrides', methods=['GET'])
@require_admin
def list_overrides():
    try:
        stale_only = request.args.get('stale') == '1'
        overrides = OverrideCollection().get_all_overrides(stale_only=stale_only)
        return jsonify({'success': True, 'overrides': serialize_document(overrides), 'count': len(overrides)}), 200
    except Exception as e:
        return jsonify({'success': False, 'message': f'Server error: {str(e)}'}), 500


@admin_pricing_bp.route('/overrides', methods=['POST'])
@require_admin
def save_override():
    try:
        data = request.get_json(silent=True)
        if not data:
            return jsonify({'success': False, 'message': 'No data provided'}), 400
        override = OverrideCollection().upsert_override(data)
        logger.info("%s saved pricing override for aircraft %s", g.admin_user, override['aircraft_id'])
        return jsonify({'success': True, 'override': serialize_document(override)}), 200
    except InvalidCatalog as e:
        return _catalog_error(e)
    except Exception as e:
        logger.exception("Failed to save pricing override")
        return jsonify({'success': False, 'message': f'Server error: {str(e)}'}), 500


@admin_pricing_bp.route('/overrides/<aircraft_id>', methods=['DELETE'])
@require_admin
def delete_override(aircraft_id):
    try:
        result = OverrideCollection().delete_override(aircraft_id)
        if result.deleted_count == 0:
            return jsonify({'success': False, 'message': 'Override not found'}), 404
        return jsonify({'success': True, 'message': 'Override deleted successfully'}), 200
    except Exception as e:
        return jsonify({'success': False, 'message': f'Server error: {str(e)}'}), 500


@admin_pricing_bp.route('/publish', methods=['POST'])
@require_admin
def publish():
    """Freeze the live catalog into a new snapshot that public pricing will read"""
    try:
        data = request.get_json(silent=True) or {}
        snapshot = publish_snapshot(
            data.get('label'),
            load_catalog_state(),
            SnapshotCollection(),
            published_by=g.admin_user,
        )
        return jsonify({'success': True, 'snapshot': serialize_document(snapshot.to_dict())}), 201
    except MissingInput as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except InvalidCatalog as e:
        return _catalog_error(e)
    except Exception as e:
        logger.exception("Failed to publish pricing snapshot")
        return jsonify({'success': False, 'message': f'Publish failed: {str(e)}'}), 500


@admin_pricing_bp.route('/snapshots', methods=['GET'])
@require_admin
def list_snapshots():
    try:
        limit = int(request.args.get('limit', 50))
        snapshots = SnapshotCollection().get_all_snapshots(limit=limit)
        return jsonify({'success': True, 'snapshots': serialize_document(snapshots), 'count': len(snapshots)}), 200
    except ValueError:
        return jsonify({'success': False, 'message': 'limit must be a number'}), 400
    except Exception as e:
        return jsonify({'success': False, 'message': f'Server error: {str(e)}'}), 500


@admin_pricing_bp.route('/margins', methods=['GET'])
@require_admin
def get_margins():
    """
    Margin per active tier and usage band, against the live catalog or a
    given snapshot, optionally including a location's hangar cost.
    """
    try:
        snapshot_id = request.args.get('snapshot_id')
        if snapshot_id:
            document = SnapshotCollection().get_snapshot_by_id(snapshot_id)
            if document is None:
                return jsonify({'success': False, 'message': 'Snapshot not found'}), 404
            catalog = Snapshot.from_document(document).payload
        else:
            catalog = CatalogPayload.from_dict(load_catalog_state())

        location_id = request.args.get('location_id')
        rows = []
        for tier in catalog.active_tiers():
            for band in catalog.usage_bands:
                breakdown = calculate_monthly_price(tier.id, band.id, [], location_id, catalog)
                margin = analyze_margin(breakdown.total, catalog.assumptions, tier, breakdown.hangar_cost)
                rows.append(dict(margin.to_dict(), tier_id=tier.id, usage_band_id=band.id))
        return jsonify({'success': True, 'margins': rows}), 200
    except NotFound as e:
        return jsonify({'success': False, 'message': str(e)}), 404
    except InvalidCatalog as e:
        return _catalog_error(e)
    except Exception as e:
        logger.exception("Failed to compute margins")
        return jsonify({'success': False, 'message': f'Server error: {str(e)}'}), 500
