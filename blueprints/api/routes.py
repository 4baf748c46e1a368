"""
API routes for JSON endpoints.
Provides REST API access to the reservation back office.

Split into smaller modules by area:
- reservations.py - Listing, details, create, edit, date moves
- approvals.py - Approve/reject, pickup/return, cancel, payment
- calendar.py - Calendar events and dashboard statistics
- fleet.py - Vehicles and locations
"""

from flask import Blueprint, current_app, jsonify

# Create the API blueprint
api_bp = Blueprint('api', __name__)


@api_bp.route('/health')
def health_check():
    """
    Health check endpoint.

    Returns:
        JSON with status and version
    """
    return jsonify({
        'status': 'ok',
        'version': current_app.config.get('APP_VERSION', '1.0.0'),
        'app': current_app.config.get('APP_NAME', 'RentDesk')
    })


# Import and register routes from submodules
from blueprints.api import reservations, approvals, calendar, fleet

reservations.register_routes(api_bp)
approvals.register_routes(api_bp)
calendar.register_routes(api_bp)
fleet.register_routes(api_bp)
