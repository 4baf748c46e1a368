"""
Fleet API routes.
Vehicles, their bookings, and rental locations.
"""

from flask import Blueprint, Response, request

from utils.api_response import api_success, api_error, api_result
from utils.datetime_helpers import get_today
from utils.messages import get_message
from utils.validators import validate_date_format
from models.vehicle import (
    VEHICLE_STATUSES,
    get_all_vehicles,
    get_vehicle_by_id,
    vehicle_exists,
    update_vehicle_status,
)
from models.location import get_all_locations, get_location_by_id
from models.reservation import ReservationError, get_vehicle_bookings
from blueprints.api.helpers import get_json_body


def register_routes(bp: Blueprint) -> None:
    """Register vehicle and location routes on the blueprint."""

    @bp.route('/vehicles', methods=['GET'])
    def list_vehicles() -> tuple[Response, int]:
        """
        List vehicles.

        Query params:
            location_id: Home location (optional)
            status: Vehicle status (optional)
            search: Plate, model or brand (optional)
        """
        vehicles = get_all_vehicles(
            location_id=request.args.get('location_id', type=int),
            status=request.args.get('status') or None,
            search=request.args.get('search') or None
        )
        return api_success(data=vehicles, count=len(vehicles))

    @bp.route('/vehicles/<int:vehicle_id>', methods=['GET'])
    def vehicle_detail(vehicle_id: int) -> tuple[Response, int]:
        """Get a single vehicle."""
        vehicle = get_vehicle_by_id(vehicle_id)
        if not vehicle:
            return api_error(get_message('vehicle_not_found'), 404, code='not_found')
        return api_success(data=vehicle)

    @bp.route('/vehicles/<int:vehicle_id>/bookings', methods=['GET'])
    def vehicle_bookings(vehicle_id: int) -> tuple[Response, int]:
        """
        Confirmed/active bookings of a vehicle touching a date range.

        Query params:
            date_from: First day YYYY-MM-DD (default: today)
            date_to: Last day YYYY-MM-DD (default: date_from)
        """
        if not vehicle_exists(vehicle_id):
            return api_error(get_message('vehicle_not_found'), 404, code='not_found')

        date_from = request.args.get('date_from') or get_today().isoformat()
        date_to = request.args.get('date_to') or date_from
        for value in (date_from, date_to):
            if not validate_date_format(value):
                return api_error(get_message('invalid_date', value=value), code='validation_error')

        try:
            bookings = get_vehicle_bookings(vehicle_id, date_from, date_to)
        except ReservationError as exc:
            return api_result(exc.to_result())
        return api_success(data=bookings, count=len(bookings))

    @bp.route('/vehicles/<int:vehicle_id>/status', methods=['PUT'])
    def vehicle_status(vehicle_id: int) -> tuple[Response, int]:
        """
        Set a vehicle's status (admin maintained).

        Request body:
            status: 'available' | 'rented' | 'maintenance' | 'inactive'
        """
        data = get_json_body()
        status = data.get('status')
        if status not in VEHICLE_STATUSES:
            return api_error(get_message('invalid_vehicle_status', value=status),
                             code='validation_error')

        if not update_vehicle_status(vehicle_id, status):
            return api_error(get_message('vehicle_not_found'), 404, code='not_found')

        return api_success(data=get_vehicle_by_id(vehicle_id),
                           message=get_message('vehicle_status_updated'))

    @bp.route('/locations', methods=['GET'])
    def list_locations() -> tuple[Response, int]:
        """
        List rental locations.

        Query params:
            active: 'false' to include inactive locations
        """
        active_only = request.args.get('active', 'true').lower() == 'true'
        locations = get_all_locations(active_only=active_only)
        return api_success(data=locations, count=len(locations))

    @bp.route('/locations/<int:location_id>', methods=['GET'])
    def location_detail(location_id: int) -> tuple[Response, int]:
        """Get a single rental location."""
        location = get_location_by_id(location_id)
        if not location:
            return api_error(get_message('location_not_found'), 404, code='not_found')
        return api_success(data=location)
