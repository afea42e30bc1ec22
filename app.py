from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from datetime import datetime
import logging
import os
from dotenv import load_dotenv

from admin_pricing import admin_pricing_bp
from mongodb_collections import OverrideCollection, QuoteCollection, SnapshotCollection
from pricing_engine import (
    InvalidCatalog, MissingInput, NotFound, Snapshot,
    calculate_monthly_price, calculate_multi_aircraft_discount, get_pricing_info,
    price_table, recommend_tier, recommend_usage_band, resolve_aircraft_price,
    tier_starting_prices,
)
from pricing_engine.money import money_to_json, round_cents, to_decimal
from templates import PDFGenerator
from utils.json_helper import serialize_document

load_dotenv()

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['ADMIN_API_TOKEN'] = os.getenv('ADMIN_API_TOKEN')
CORS(app)
app.register_blueprint(admin_pricing_bp)

pdf_generator = PDFGenerator()


def _load_snapshot(snapshot_id=None):
    """Snapshot to price against: the given one, else the latest published"""
    snapshots = SnapshotCollection()
    if snapshot_id:
        document = snapshots.get_snapshot_by_id(snapshot_id)
    else:
        document = snapshots.get_latest_snapshot()
    return Snapshot.from_document(document)


def _as_bool(value, default=False):
    """JSON flags sometimes arrive as strings ("false", "0")"""
    if value is None or value == '':
        return default
    if isinstance(value, str):
        return value.strip().lower() not in ('false', '0', 'no', 'off')
    return bool(value)


def _selection_from_request(data):
    return {
        "tier_id": data.get('tierId'),
        "usage_band_id": data.get('usageBandId'),
        "addon_ids": data.get('addOnIds') or [],
        "location_id": data.get('locationId') or None,
    }


def _labels(snapshot, breakdown):
    """Display names for the PDF, from the snapshot the quote was priced against"""
    catalog = snapshot.payload
    labels = {}
    try:
        labels['tier'] = catalog.get_tier(breakdown['tierId'], include_inactive=True).name
        labels['usage_band'] = catalog.get_band(breakdown['usageBandId']).label
        if breakdown.get('locationId'):
            labels['location'] = catalog.get_location(breakdown['locationId'], include_inactive=True).name
    except NotFound:
        pass
    return labels


def _no_snapshot():
    return jsonify({"success": False, "message": "No pricing has been published yet"}), 404


def _pricing_error(e):
    """Map engine errors to responses; a NotFound is a catalog/config problem worth logging"""
    if isinstance(e, MissingInput):
        return jsonify({"success": False, "message": str(e), "field": e.field}), 400
    if isinstance(e, NotFound):
        logger.error("Pricing lookup failed: %s", e)
        return jsonify({"success": False, "message": str(e), "kind": e.kind}), 404
    logger.error("Published pricing is invalid: %s", e)
    return jsonify({"success": False, "message": f"Pricing configuration error: {str(e)}"}), 500


@app.route('/api/health')
def health():
    return jsonify({"success": True, "status": "ok", "time": datetime.now().isoformat()})


# Public pricing APIs - always read a published snapshot, never the live tables
@app.route('/api/pricing/snapshot/latest', methods=['GET'])
def get_latest_snapshot():
    try:
        snapshot = _load_snapshot()
        if snapshot is None:
            return _no_snapshot()
        return jsonify({"success": True, "snapshot": serialize_document(snapshot.to_dict())}), 200
    except InvalidCatalog as e:
        return _pricing_error(e)
    except Exception as e:
        logger.exception("Error fetching latest snapshot")
        return jsonify({"success": False, "message": f"Error fetching pricing: {str(e)}"}), 500


@app.route('/api/pricing/info', methods=['GET'])
def get_public_pricing_info():
    try:
        snapshot = _load_snapshot(request.args.get('snapshotId'))
        if snapshot is None:
            return _no_snapshot()
        return jsonify({"success": True, "snapshotId": snapshot.id, "pricing": get_pricing_info(snapshot.payload)}), 200
    except InvalidCatalog as e:
        return _pricing_error(e)
    except Exception as e:
        logger.exception("Error building pricing info")
        return jsonify({"success": False, "message": f"Error fetching pricing: {str(e)}"}), 500


@app.route('/api/pricing/calculate', methods=['POST'])
def calculate_price():
    """Price a configurator selection; cheap enough to call on every change"""
    try:
        data = request.get_json(silent=True)
        if not data:
            return jsonify({"success": False, "message": "No data provided"}), 400

        snapshot = _load_snapshot(data.get('snapshotId'))
        if snapshot is None:
            return _no_snapshot()

        selection = _selection_from_request(data)
        breakdown = calculate_monthly_price(
            selection['tier_id'], selection['usage_band_id'], selection['addon_ids'],
            selection['location_id'], snapshot.payload,
        )
        return jsonify({"success": True, "snapshotId": snapshot.id, "breakdown": breakdown.to_dict()}), 200
    except (MissingInput, NotFound, InvalidCatalog) as e:
        return _pricing_error(e)
    except Exception as e:
        logger.exception("Error in calculate_price")
        return jsonify({"success": False, "message": f"Internal server error: {str(e)}"}), 500


@app.route('/api/pricing/table/<tier_id>', methods=['GET'])
def get_price_table(tier_id):
    """One tier priced at every usage band, for side-by-side comparison"""
    try:
        snapshot = _load_snapshot(request.args.get('snapshotId'))
        if snapshot is None:
            return _no_snapshot()
        addon_ids = [a for a in request.args.get('addOnIds', '').split(',') if a]
        rows = price_table(tier_id, snapshot.payload, addon_ids, request.args.get('locationId'))
        return jsonify({"success": True, "snapshotId": snapshot.id, "table": [row.to_dict() for row in rows]}), 200
    except (MissingInput, NotFound, InvalidCatalog) as e:
        return _pricing_error(e)
    except Exception as e:
        logger.exception("Error in get_price_table")
        return jsonify({"success": False, "message": f"Internal server error: {str(e)}"}), 500


@app.route('/api/pricing/starting-prices', methods=['GET'])
def get_starting_prices():
    try:
        snapshot = _load_snapshot()
        if snapshot is None:
            return _no_snapshot()
        prices = {tier_id: money_to_json(total) for tier_id, total in tier_starting_prices(snapshot.payload).items()}
        return jsonify({"success": True, "snapshotId": snapshot.id, "startingPrices": prices}), 200
    except InvalidCatalog as e:
        return _pricing_error(e)
    except Exception as e:
        logger.exception("Error in get_starting_prices")
        return jsonify({"success": False, "message": f"Internal server error: {str(e)}"}), 500


@app.route('/api/pricing/recommendation', methods=['GET'])
def get_recommendation():
    """Suggested tier for an aircraft and band for a monthly hours figure (onboarding)"""
    try:
        snapshot = _load_snapshot()
        if snapshot is None:
            return _no_snapshot()
        tier = recommend_tier(request.args.get('make'), request.args.get('model'), snapshot.payload)
        try:
            band = recommend_usage_band(request.args.get('hours'), snapshot.payload)
        except ValueError as e:
            return jsonify({"success": False, "message": f"Invalid hours: {str(e)}"}), 400
        return jsonify({
            "success": True,
            "snapshotId": snapshot.id,
            "tierId": tier.id if tier else None,
            # no hours, no band: the customer has to pick one
            "usageBandId": band.id if band else None,
        }), 200
    except InvalidCatalog as e:
        return _pricing_error(e)
    except Exception as e:
        logger.exception("Error in get_recommendation")
        return jsonify({"success": False, "message": f"Internal server error: {str(e)}"}), 500


@app.route('/api/pricing/fleet-discount', methods=['POST'])
def get_fleet_discount():
    try:
        data = request.get_json(silent=True) or {}
        try:
            aircraft_count = int(data.get('aircraftCount', 1))
            monthly_price = to_decimal(data.get('monthlyPrice'))
        except (TypeError, ValueError) as e:
            return jsonify({"success": False, "message": f"Invalid numeric values provided: {str(e)}"}), 400
        if aircraft_count < 1 or monthly_price < 0:
            return jsonify({"success": False, "message": "aircraftCount must be >= 1 and monthlyPrice >= 0"}), 400
        result = calculate_multi_aircraft_discount(aircraft_count, monthly_price)
        return jsonify({
            "success": True,
            "discount": money_to_json(result['discount']),
            "finalPrice": money_to_json(result['finalPrice']),
        }), 200
    except Exception as e:
        logger.exception("Error in get_fleet_discount")
        return jsonify({"success": False, "message": f"Internal server error: {str(e)}"}), 500


@app.route('/api/locations/hangars', methods=['GET'])
def get_hangar_partners():
    """Partner hangars from the published price list; own storage is not a partner"""
    try:
        snapshot = _load_snapshot()
        if snapshot is None:
            return _no_snapshot()
        hangars = [location.to_dict() for location in snapshot.payload.hangar_partners()]
        for hangar in hangars:
            hangar['hangar_cost_monthly'] = money_to_json(hangar['hangar_cost_monthly'])
        return jsonify({"success": True, "hangars": hangars}), 200
    except InvalidCatalog as e:
        return _pricing_error(e)
    except Exception as e:
        logger.exception("Error in get_hangar_partners")
        return jsonify({"success": False, "message": f"Internal server error: {str(e)}"}), 500


# Quote APIs
@app.route('/api/quotes', methods=['POST'])
def create_quote():
    try:
        data = request.get_json(silent=True)
        if not data:
            return jsonify({"success": False, "message": "No data provided"}), 400

        customer = data.get('customer') or {}
        if not customer.get('email'):
            return jsonify({"success": False, "message": "Customer email is required"}), 400

        snapshot = _load_snapshot(data.get('snapshotId'))
        if snapshot is None:
            return _no_snapshot()

        selection = _selection_from_request(data)
        breakdown = calculate_monthly_price(
            selection['tier_id'], selection['usage_band_id'], selection['addon_ids'],
            selection['location_id'], snapshot.payload,
        )
        quote_data = {
            "customer": {
                "name": customer.get('name', ''),
                "email": customer.get('email'),
                "phone": customer.get('phone', ''),
                "aircraft": customer.get('aircraft', ''),
            },
            "selection": selection,
            "snapshot_id": snapshot.id,
            "snapshot_label": snapshot.label,
            "breakdown": breakdown.to_dict(),
        }
        result = QuoteCollection().create_quote(quote_data)
        logger.info("Created quote %s for %s against snapshot %s", result.inserted_id, customer.get('email'), snapshot.id)
        return jsonify({
            "success": True,
            "quote_id": str(result.inserted_id),
            "snapshotId": snapshot.id,
            "breakdown": breakdown.to_dict(),
        }), 201
    except (MissingInput, NotFound, InvalidCatalog) as e:
        return _pricing_error(e)
    except Exception as e:
        logger.exception("Error in create_quote")
        return jsonify({"success": False, "message": f"Internal server error: {str(e)}"}), 500


@app.route('/api/quotes/<quote_id>', methods=['GET'])
def get_quote(quote_id):
    try:
        quote = QuoteCollection().get_quote_by_id(quote_id)
        if not quote:
            return jsonify({"success": False, "message": "Quote not found"}), 404
        return jsonify({"success": True, "quote": serialize_document(quote)}), 200
    except Exception as e:
        return jsonify({"success": False, "message": f"Error fetching quote: {str(e)}"}), 500


@app.route('/api/quotes/<quote_id>/status', methods=['POST'])
def update_quote_status(quote_id):
    """Update quote status"""
    try:
        data = request.get_json(silent=True) or {}
        new_status = data.get('status')
        if not new_status:
            return jsonify({"success": False, "message": "Status is required"}), 400

        try:
            result = QuoteCollection().update_quote_status(quote_id, new_status, data.get('notes', ''))
        except ValueError as e:
            return jsonify({"success": False, "message": str(e)}), 400

        if result is None or result.matched_count == 0:
            return jsonify({"success": False, "message": "Quote not found"}), 404
        return jsonify({"success": True, "message": f"Quote status updated to {new_status}"}), 200
    except Exception as e:
        logger.exception("Error in update_quote_status")
        return jsonify({"success": False, "message": f"Failed to update quote status: {str(e)}"}), 500


@app.route('/api/quotes/<quote_id>/invoice-line', methods=['GET'])
def get_quote_invoice_lines(quote_id):
    """
    Rebuild invoice lines from the snapshot the customer was quoted against,
    not from the live catalog, so billing matches the quote.
    """
    try:
        quote = QuoteCollection().get_quote_by_id(quote_id)
        if not quote:
            return jsonify({"success": False, "message": "Quote not found"}), 404

        snapshot = _load_snapshot(quote['snapshot_id'])
        if snapshot is None:
            logger.error("Quote %s references missing snapshot %s", quote_id, quote['snapshot_id'])
            return jsonify({"success": False, "message": "Quoted price list no longer exists"}), 409

        selection = quote['selection']
        # tiers or locations deactivated since the quote still bill at the quoted price
        breakdown = calculate_monthly_price(
            selection['tier_id'], selection['usage_band_id'], selection.get('addon_ids') or [],
            selection.get('location_id'), snapshot.payload, include_inactive=True,
        )

        def line(description, amount):
            unit_cents = int(round_cents(amount) * 100)
            return {"description": description, "quantity": 1, "unit_cents": unit_cents, "amount_cents": unit_cents}

        lines = [line(f"Membership: {breakdown.tier_id} ({breakdown.usage_band_id})", breakdown.usage_adjusted_price)]
        lines.extend(line(f"Add-on: {addon.name}", addon.amount) for addon in breakdown.addons)
        if breakdown.hangar_cost > 0:
            lines.append(line(f"Hangar: {breakdown.location_id}", breakdown.hangar_cost))

        quoted_total = quote.get('breakdown', {}).get('total')
        total_cents = int(round_cents(breakdown.total) * 100)
        drift = quoted_total is not None and int(round_cents(quoted_total) * 100) != total_cents
        if drift:
            logger.error("Quote %s reproduces to %s but was quoted at %s", quote_id, breakdown.total, quoted_total)

        return jsonify({
            "success": True,
            "quote_id": quote_id,
            "snapshotId": snapshot.id,
            "lines": lines,
            "total_cents": total_cents,
            "matchesQuote": not drift,
        }), 200
    except (MissingInput, NotFound, InvalidCatalog) as e:
        return _pricing_error(e)
    except Exception as e:
        logger.exception("Error in get_quote_invoice_lines")
        return jsonify({"success": False, "message": f"Internal server error: {str(e)}"}), 500


@app.route('/api/quotes/<quote_id>/pdf', methods=['GET'])
def get_quote_pdf(quote_id):
    try:
        quote = QuoteCollection().get_quote_by_id(quote_id)
        if not quote:
            return jsonify({"success": False, "message": "Quote not found"}), 404

        snapshot = _load_snapshot(quote['snapshot_id'])
        labels = _labels(snapshot, quote['breakdown']) if snapshot else {}
        pdf_buffer = pdf_generator.create_quote_pdf(
            quote['customer'], quote['breakdown'], quote['selection'],
            snapshot_label=quote.get('snapshot_label'), labels=labels,
            quote_date=quote.get('created_at'),
        )
        customer_name = (quote['customer'].get('name') or 'customer').replace(' ', '_')
        return send_file(
            pdf_buffer,
            as_attachment=True,
            download_name=f"quote_{customer_name}_{datetime.now().strftime('%Y%m%d')}.pdf",
            mimetype='application/pdf'
        )
    except Exception as e:
        logger.exception("Error generating quote PDF")
        return jsonify({"success": False, "message": f"PDF generation failed: {str(e)}"}), 500


# Aircraft pricing (billing and the owner dashboard)
@app.route('/api/aircraft/<aircraft_id>/price', methods=['POST'])
def get_aircraft_price(aircraft_id):
    """Computed price for an aircraft, replaced by its negotiated override when one applies"""
    try:
        data = request.get_json(silent=True)
        if not data:
            return jsonify({"success": False, "message": "No data provided"}), 400

        snapshot = _load_snapshot(data.get('snapshotId'))
        if snapshot is None:
            return _no_snapshot()

        overrides = OverrideCollection()
        override = overrides.get_override(aircraft_id)
        price = resolve_aircraft_price(
            aircraft_id,
            _selection_from_request(data),
            snapshot.payload,
            override=override,
            aircraft_exists=_as_bool(data.get('aircraftExists'), default=True),
        )
        if price.stale_override:
            overrides.mark_stale(aircraft_id, price.stale_reason)
        return jsonify({"success": True, "snapshotId": snapshot.id, "price": price.to_dict()}), 200
    except (MissingInput, NotFound, InvalidCatalog) as e:
        return _pricing_error(e)
    except Exception as e:
        logger.exception("Error in get_aircraft_price")
        return jsonify({"success": False, "message": f"Internal server error: {str(e)}"}), 500


if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    app.run(host='0.0.0.0', port=port, debug=os.getenv('FLASK_DEBUG') == '1')
