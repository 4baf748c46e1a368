"""
Calendar and dashboard API routes.
"""

from flask import Blueprint, Response, request

from utils.api_response import api_success, api_error, api_result
from utils.messages import get_message
from utils.validators import validate_date_format
from utils.datetime_helpers import get_today
from models.reservation import (
    ReservationError,
    CalendarFilter,
    project,
    get_reservation_stats,
    get_location_stats,
)
from blueprints.api.helpers import get_list_arg


def register_routes(bp: Blueprint) -> None:
    """Register calendar and statistics routes on the blueprint."""

    @bp.route('/calendar', methods=['GET'])
    def calendar_events() -> tuple[Response, int]:
        """
        Calendar events for a date window.

        Query params:
            start: First day YYYY-MM-DD (default: today)
            end: Last day YYYY-MM-DD (default: start)
            location_id: Vehicle home location (optional)
            vehicle_id: Vehicle (optional)
            status: Comma-separated statuses (default: pending, confirmed, active)
        """
        start = request.args.get('start') or get_today().isoformat()
        end = request.args.get('end') or start

        # FullCalendar sends ISO datetimes; the window is day based
        start, end = start[:10], end[:10]
        for value in (start, end):
            if not validate_date_format(value):
                return api_error(get_message('invalid_date', value=value), code='validation_error')

        filters = {}
        if request.args.get('location_id'):
            filters['location_id'] = request.args.get('location_id', type=int)
        if request.args.get('vehicle_id'):
            filters['vehicle_id'] = request.args.get('vehicle_id', type=int)
        statuses = get_list_arg('status')
        if statuses:
            filters['statuses'] = statuses

        try:
            events = project((start, end), CalendarFilter(**filters))
        except ReservationError as exc:
            return api_result(exc.to_result())

        return api_success(data=events, count=len(events))

    @bp.route('/stats', methods=['GET'])
    def reservation_stats() -> tuple[Response, int]:
        """Dashboard counters and revenue."""
        return api_success(data=get_reservation_stats())

    @bp.route('/stats/locations', methods=['GET'])
    def location_stats() -> tuple[Response, int]:
        """Per-location vehicle and reservation summaries."""
        return api_success(data=get_location_stats())
