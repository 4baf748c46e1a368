"""
Reservation status API routes.
Approval, rejection, bulk actions, vehicle pickup/return, cancellation and
payment status.
"""

from flask import Blueprint, Response

from utils.api_response import api_success, api_error, api_result
from utils.messages import get_message
from utils.validators import validate_integer_list
from models.reservation import (
    approve_reservation,
    reject_reservation,
    bulk_approve_reservations,
    bulk_reject_reservations,
    start_rental,
    process_return,
    cancel_reservation,
    update_payment_status,
    get_valid_transitions,
    STATUS_COLORS,
)
from blueprints.api.helpers import get_actor, get_expected_version, get_json_body


def register_routes(bp: Blueprint) -> None:
    """Register reservation status routes on the blueprint."""

    @bp.route('/reservations/transitions', methods=['GET'])
    def reservation_transitions() -> tuple[Response, int]:
        """Allowed status changes and status colors, for the front end."""
        transitions = {k: sorted(v) for k, v in get_valid_transitions().items()}
        return api_success(transitions=transitions, colors=STATUS_COLORS)

    @bp.route('/reservations/<int:reservation_id>/approve', methods=['POST'])
    def approve_reservation_route(reservation_id: int) -> tuple[Response, int]:
        """
        Approve a pending reservation.

        Request body (optional):
            admin_notes: str
            expected_version: int

        Returns 409 with 'conflicts' when the vehicle is already booked.
        """
        data = get_json_body()
        valid, expected_version, err = get_expected_version(data)
        if not valid:
            return api_error(err, code='validation_error')

        result = approve_reservation(
            reservation_id, get_actor(data),
            admin_notes=data.get('admin_notes'),
            expected_version=expected_version
        )
        return api_result(result)

    @bp.route('/reservations/<int:reservation_id>/reject', methods=['POST'])
    def reject_reservation_route(reservation_id: int) -> tuple[Response, int]:
        """
        Reject a pending reservation.

        Request body:
            admin_notes: str (required, the rejection reason)
            expected_version: int (optional)
        """
        data = get_json_body()
        valid, expected_version, err = get_expected_version(data)
        if not valid:
            return api_error(err, code='validation_error')

        result = reject_reservation(
            reservation_id, get_actor(data),
            admin_notes=data.get('admin_notes'),
            expected_version=expected_version
        )
        return api_result(result)

    @bp.route('/reservations/bulk-approve', methods=['POST'])
    def bulk_approve_route() -> tuple[Response, int]:
        """
        Approve several reservations. Each ID succeeds or fails on its own.

        Request body:
            ids: list[int]
            admin_notes: str (optional)
        """
        data = get_json_body()
        valid, ids, err = validate_integer_list(data.get('ids'), 'ids')
        if not valid:
            return api_error(err, code='validation_error')

        return api_result(bulk_approve_reservations(ids, get_actor(data), data.get('admin_notes')))

    @bp.route('/reservations/bulk-reject', methods=['POST'])
    def bulk_reject_route() -> tuple[Response, int]:
        """
        Reject several reservations with the same reason.

        Request body:
            ids: list[int]
            admin_notes: str (required)
        """
        data = get_json_body()
        valid, ids, err = validate_integer_list(data.get('ids'), 'ids')
        if not valid:
            return api_error(err, code='validation_error')

        return api_result(bulk_reject_reservations(ids, get_actor(data), data.get('admin_notes')))

    @bp.route('/reservations/<int:reservation_id>/pickup', methods=['POST'])
    def pickup_route(reservation_id: int) -> tuple[Response, int]:
        """
        Hand the vehicle over (confirmed -> active).

        Request body (optional):
            actual_pickup_time: ISO datetime
            start_mileage: int
            pickup_notes: str
            expected_version: int
        """
        data = get_json_body()
        valid, expected_version, err = get_expected_version(data)
        if not valid:
            return api_error(err, code='validation_error')

        result = start_rental(
            reservation_id, get_actor(data),
            actual_pickup_time=data.get('actual_pickup_time'),
            start_mileage=data.get('start_mileage'),
            pickup_notes=data.get('pickup_notes'),
            expected_version=expected_version
        )
        return api_result(result)

    @bp.route('/reservations/<int:reservation_id>/return', methods=['POST'])
    def return_route(reservation_id: int) -> tuple[Response, int]:
        """
        Take the vehicle back (active -> completed).

        Request body (optional):
            actual_return_time: ISO datetime
            condition: str
            mileage: int
            return_notes: str
            expected_version: int
        """
        data = get_json_body()
        valid, expected_version, err = get_expected_version(data)
        if not valid:
            return api_error(err, code='validation_error')

        result = process_return(
            reservation_id, get_actor(data),
            actual_return_time=data.get('actual_return_time'),
            condition=data.get('condition'),
            mileage=data.get('mileage'),
            return_notes=data.get('return_notes'),
            expected_version=expected_version
        )
        return api_result(result)

    @bp.route('/reservations/<int:reservation_id>/cancel', methods=['POST'])
    def cancel_route(reservation_id: int) -> tuple[Response, int]:
        """
        Cancel a reservation.

        Request body (optional):
            notes: str
            expected_version: int
        """
        data = get_json_body()
        valid, expected_version, err = get_expected_version(data)
        if not valid:
            return api_error(err, code='validation_error')

        result = cancel_reservation(
            reservation_id, get_actor(data),
            notes=data.get('notes', ''),
            expected_version=expected_version
        )
        return api_result(result)

    @bp.route('/reservations/<int:reservation_id>/payment', methods=['PUT'])
    def payment_route(reservation_id: int) -> tuple[Response, int]:
        """
        Change the payment status.

        Request body:
            payment_status: 'pending' | 'paid' | 'refunded'
            expected_version: int (optional)
        """
        data = get_json_body()
        if not data.get('payment_status'):
            return api_error(get_message('field_required', field='payment_status'),
                             code='validation_error')

        valid, expected_version, err = get_expected_version(data)
        if not valid:
            return api_error(err, code='validation_error')

        result = update_payment_status(
            reservation_id, data['payment_status'],
            changed_by=get_actor(data),
            expected_version=expected_version
        )
        return api_result(result)
