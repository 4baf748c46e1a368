"""
Reservation API routes.
Listing, details, creation, field edits and date moves.
"""

from flask import Blueprint, Response, current_app, request

from utils.api_response import api_success, api_error, api_result
from utils.messages import get_message
from utils.validators import validate_date_format
from models.reservation import (
    ReservationError,
    ReservationQuery,
    get_reservations,
    get_pending_reservations,
    get_recent_reservations,
    get_reservation_by_id,
    get_reservation_by_number,
    get_status_history,
    create_reservation,
    update_reservation,
    move_reservation,
    check_move_availability,
    UPDATABLE_FIELDS,
)
from blueprints.api.helpers import (
    get_actor, get_expected_version, get_json_body, get_list_arg
)


def register_routes(bp: Blueprint) -> None:
    """Register reservation routes on the blueprint."""

    @bp.route('/reservations', methods=['GET'])
    def list_reservations() -> tuple[Response, int]:
        """
        List reservations with filters and pagination.

        Query params:
            status, payment_status: Comma-separated or repeated
            start_date, end_date: YYYY-MM-DD
            search: Guest name, email or reservation number
            vehicle_id, location_id: int
            sort_by, sort_order, page, limit
        """
        for name in ('start_date', 'end_date'):
            value = request.args.get(name)
            if value and not validate_date_format(value):
                return api_error(get_message('invalid_date', value=value), code='validation_error')

        try:
            query = ReservationQuery(
                statuses=get_list_arg('status'),
                payment_statuses=get_list_arg('payment_status'),
                start_date=request.args.get('start_date') or None,
                end_date=request.args.get('end_date') or None,
                search=request.args.get('search') or None,
                vehicle_id=request.args.get('vehicle_id', type=int),
                location_id=request.args.get('location_id', type=int),
                sort_by=request.args.get('sort_by', 'created_at'),
                sort_order=request.args.get('sort_order', 'desc'),
                page=request.args.get('page', 1, type=int),
                limit=request.args.get('limit', current_app.config['ITEMS_PER_PAGE'], type=int),
            )
            page = get_reservations(query)
        except ReservationError as exc:
            return api_result(exc.to_result())

        return api_success(
            data=page.pop('data'),
            pagination=page
        )

    @bp.route('/reservations/pending', methods=['GET'])
    def list_pending_reservations() -> tuple[Response, int]:
        """Reservations awaiting approval, oldest first."""
        reservations = get_pending_reservations()
        return api_success(data=reservations, count=len(reservations))

    @bp.route('/reservations/recent', methods=['GET'])
    def list_recent_reservations() -> tuple[Response, int]:
        """Most recently created reservations."""
        limit = min(max(request.args.get('limit', 10, type=int), 1), 100)
        return api_success(data=get_recent_reservations(limit))

    @bp.route('/reservations/<int:reservation_id>', methods=['GET'])
    def reservation_detail(reservation_id: int) -> tuple[Response, int]:
        """Get a single reservation with vehicle, location and customer details."""
        reservation = get_reservation_by_id(reservation_id)
        if not reservation:
            return api_error(get_message('reservation_not_found'), 404, code='not_found')
        return api_success(data=reservation.to_dict())

    @bp.route('/reservations/number/<reservation_number>', methods=['GET'])
    def reservation_by_number(reservation_number: str) -> tuple[Response, int]:
        """Look up a reservation by its RVYYMMDDNNN number."""
        reservation = get_reservation_by_number(reservation_number.strip().upper())
        if not reservation:
            return api_error(get_message('reservation_not_found'), 404, code='not_found')
        return api_success(data=reservation.to_dict())

    @bp.route('/reservations/<int:reservation_id>/history', methods=['GET'])
    def reservation_history(reservation_id: int) -> tuple[Response, int]:
        """Status change history, newest first."""
        if not get_reservation_by_id(reservation_id):
            return api_error(get_message('reservation_not_found'), 404, code='not_found')
        return api_success(data=get_status_history(reservation_id))

    @bp.route('/reservations', methods=['POST'])
    def create_reservation_route() -> tuple[Response, int]:
        """
        Create a pending reservation.

        Request body:
            vehicle_id: int (required)
            start, end: ISO date or datetime (required)
            customer_id: int, or guest_name (+ guest_phone, guest_email)
            pickup_location_id, return_location_id: int (optional)
            total_amount: number
            notes: str
        """
        data = get_json_body()
        if not data:
            return api_error(get_message('data_required'), code='validation_error')

        for field in ('vehicle_id', 'start', 'end'):
            if not data.get(field):
                return api_error(get_message('field_required', field=field), code='validation_error')

        result = create_reservation(
            vehicle_id=data['vehicle_id'],
            start=data['start'],
            end=data['end'],
            customer_id=data.get('customer_id'),
            guest_name=data.get('guest_name'),
            guest_phone=data.get('guest_phone'),
            guest_email=data.get('guest_email'),
            pickup_location_id=data.get('pickup_location_id'),
            return_location_id=data.get('return_location_id'),
            total_amount=data.get('total_amount') or 0,
            notes=data.get('notes', ''),
            created_by=get_actor(data)
        )
        return api_result(result, success_status=201)

    @bp.route('/reservations/<int:reservation_id>', methods=['PATCH'])
    def update_reservation_route(reservation_id: int) -> tuple[Response, int]:
        """
        Edit contact details, notes or locations.

        Request body: any of UPDATABLE_FIELDS, plus optional expected_version
        """
        data = get_json_body()
        if not data:
            return api_error(get_message('data_required'), code='validation_error')

        valid, expected_version, err = get_expected_version(data)
        if not valid:
            return api_error(err, code='validation_error')

        fields = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}
        return api_result(update_reservation(reservation_id, expected_version, **fields))

    @bp.route('/reservations/<int:reservation_id>/move', methods=['POST'])
    def move_reservation_route(reservation_id: int) -> tuple[Response, int]:
        """
        Change a reservation's dates (calendar drag and drop).

        Request body:
            start, end: ISO date or datetime (required)
            expected_version: int (optional)

        On 409 the calendar reverts the dropped event.
        """
        data = get_json_body()
        if not data:
            return api_error(get_message('data_required'), code='validation_error')

        if not data.get('start') or not data.get('end'):
            return api_error(get_message('date_required'), code='validation_error')

        valid, expected_version, err = get_expected_version(data)
        if not valid:
            return api_error(err, code='validation_error')

        result = move_reservation(
            reservation_id, data['start'], data['end'],
            changed_by=get_actor(data),
            expected_version=expected_version
        )
        return api_result(result)

    @bp.route('/reservations/<int:reservation_id>/check-move', methods=['POST'])
    def check_move_route(reservation_id: int) -> tuple[Response, int]:
        """
        Check whether a reservation could be moved, without moving it.

        Request body:
            start, end: ISO date or datetime (required)
        """
        data = get_json_body()
        if not data:
            return api_error(get_message('data_required'), code='validation_error')

        if not data.get('start') or not data.get('end'):
            return api_error(get_message('date_required'), code='validation_error')

        return api_result(check_move_availability(reservation_id, data['start'], data['end']))
