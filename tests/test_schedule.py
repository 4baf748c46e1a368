"""
Tests for reservation date moves (calendar drag and drop).
"""

import time

import pytest


class TestMoveReservation:
    """Tests for move_reservation."""

    def test_move_to_free_slot(self, app, fleet, make_reservation):
        from models.reservation_crud import get_reservation_by_id
        from models.reservation_schedule import move_reservation

        reservation_id = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12',
                                          status='confirmed')
        with app.app_context():
            before = get_reservation_by_id(reservation_id)
            time.sleep(0.001)
            result = move_reservation(reservation_id, '2026-06-20', '2026-06-22', 'park')

        assert result['success'] is True
        moved = result['reservation']
        assert moved['start'] == '2026-06-20T09:00'
        assert moved['end'] == '2026-06-22T18:00'
        assert moved['updated_at'] != before.updated_at
        assert moved['version'] == before.version + 1
        assert moved['total_amount'] == before.total_amount

    def test_move_onto_confirmed_range_rejected(self, app, fleet, make_reservation):
        """A's range stays unchanged when B already holds the target range."""
        from models.reservation_crud import get_reservation_by_id
        from models.reservation_schedule import move_reservation

        a = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12', status='confirmed')
        b = make_reservation(fleet['sonata'], '2026-06-20', '2026-06-22', status='confirmed')

        with app.app_context():
            before = get_reservation_by_id(a)
            result = move_reservation(a, '2026-06-21', '2026-06-23', 'park')
            after = get_reservation_by_id(a)

        assert result['success'] is False
        assert result['error'] == 'scheduling_conflict'
        assert result['message'] == 'Vehicle already booked for that range'
        assert [c['id'] for c in result['conflicts']] == [b]
        assert after == before

    def test_move_overlapping_own_range(self, app, fleet, make_reservation):
        """Shifting a reservation by a day overlaps only itself."""
        from models.reservation_schedule import move_reservation

        reservation_id = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12',
                                          status='confirmed')

        with app.app_context():
            result = move_reservation(reservation_id, '2026-06-11', '2026-06-13')

        assert result['success'] is True

    def test_move_adjacent_to_other_booking(self, app, fleet, make_reservation):
        from models.reservation_schedule import move_reservation

        make_reservation(fleet['sonata'], '2026-06-20T09:00', '2026-06-22T09:00',
                         status='confirmed')
        reservation_id = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12',
                                          status='confirmed')

        with app.app_context():
            result = move_reservation(reservation_id, '2026-06-22T09:00', '2026-06-24T09:00')

        assert result['success'] is True

    def test_pending_reservation_ignores_pending_overlaps(self, app, fleet, make_reservation):
        from models.reservation_schedule import move_reservation

        make_reservation(fleet['sonata'], '2026-06-20', '2026-06-22')
        reservation_id = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12')

        with app.app_context():
            result = move_reservation(reservation_id, '2026-06-20', '2026-06-22')

        assert result['success'] is True

    def test_move_with_timezone_aware_input(self, app, fleet, make_reservation):
        """The calendar sends UTC; storage is local Seoul time."""
        from models.reservation_schedule import move_reservation

        reservation_id = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12',
                                          status='confirmed')

        with app.app_context():
            result = move_reservation(reservation_id, '2026-06-20T00:00:00.000Z',
                                      '2026-06-22T09:00:00.000Z')

        assert result['reservation']['start'] == '2026-06-20T09:00'
        assert result['reservation']['end'] == '2026-06-22T18:00'

    def test_inverted_range_rejected(self, app, fleet, make_reservation):
        from models.reservation_schedule import move_reservation

        reservation_id = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12',
                                          status='confirmed')

        with app.app_context():
            result = move_reservation(reservation_id, '2026-06-22', '2026-06-20')

        assert result['error'] == 'validation_error'

    @pytest.mark.parametrize('status', ['completed', 'cancelled'])
    def test_terminal_reservation_cannot_move(self, app, fleet, make_reservation, status):
        from models.reservation_schedule import move_reservation

        reservation_id = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12',
                                          status=status)

        with app.app_context():
            result = move_reservation(reservation_id, '2026-06-20', '2026-06-22')

        assert result['error'] == 'invalid_transition'

    def test_missing_reservation(self, app):
        from models.reservation_schedule import move_reservation

        with app.app_context():
            result = move_reservation(9999, '2026-06-20', '2026-06-22')

        assert result['error'] == 'not_found'

    def test_stale_version(self, app, fleet, make_reservation):
        from models.reservation_schedule import move_reservation

        reservation_id = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12',
                                          status='confirmed')

        with app.app_context():
            first = move_reservation(reservation_id, '2026-06-20', '2026-06-22',
                                     expected_version=1)
            second = move_reservation(reservation_id, '2026-06-25', '2026-06-27',
                                      expected_version=1)

        assert first['success'] is True
        assert second['error'] == 'concurrency_conflict'


class TestCheckMoveAvailability:
    """Tests for the dry-run check."""

    def test_reports_conflicts_without_writing(self, app, fleet, make_reservation):
        from models.reservation_crud import get_reservation_by_id
        from models.reservation_schedule import check_move_availability

        a = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12', status='confirmed')
        make_reservation(fleet['sonata'], '2026-06-20', '2026-06-22', status='confirmed')

        with app.app_context():
            before = get_reservation_by_id(a)
            busy = check_move_availability(a, '2026-06-21', '2026-06-23')
            free = check_move_availability(a, '2026-06-25', '2026-06-26')
            after = get_reservation_by_id(a)

        assert busy['success'] is True
        assert busy['available'] is False
        assert len(busy['conflicts']) == 1
        assert free['available'] is True
        assert free['start'] == '2026-06-25T09:00'
        assert after == before

    def test_check_runs_while_another_writer_holds_the_lock(self, app, db_path, fleet,
                                                            make_reservation):
        import sqlite3
        from models.reservation_schedule import check_move_availability

        reservation_id = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12',
                                          status='confirmed')
        app.config['DATABASE_TIMEOUT'] = 0.2

        writer = sqlite3.connect(db_path)
        writer.execute('BEGIN IMMEDIATE')
        try:
            with app.app_context():
                result = check_move_availability(reservation_id, '2026-06-20', '2026-06-22')
        finally:
            writer.rollback()
            writer.close()

        assert result['success'] is True
        assert result['available'] is True

    def test_missing_reservation(self, app):
        from models.reservation_schedule import check_move_availability

        with app.app_context():
            result = check_move_availability(9999, '2026-06-20', '2026-06-22')

        assert result['error'] == 'not_found'
