import hmac
from functools import wraps

from flask import current_app, g, jsonify, request


def _bearer_token():
    header = request.headers.get('Authorization', '')
    if header.lower().startswith('bearer '):
        return header[7:].strip()
    return ''


def require_admin(view):
    """
    Gate catalog edits and publishing behind the admin API token.

    The token comes from ADMIN_API_TOKEN; the acting user (for the snapshot
    audit trail) from the optional X-Admin-User header.
    """
    @wraps(view)
    def wrapper(*args, **kwargs):
        expected = current_app.config.get('ADMIN_API_TOKEN')
        if not expected:
            return jsonify({"success": False, "message": "Admin API is not configured"}), 503
        if not hmac.compare_digest(_bearer_token(), expected):
            return jsonify({"success": False, "message": "Administrator access required"}), 401
        g.admin_user = request.headers.get('X-Admin-User', 'admin')
        return view(*args, **kwargs)
    return wrapper
