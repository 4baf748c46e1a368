"""
Tests for concurrent check-then-write operations.

Each thread gets its own app context and therefore its own SQLite
connection, like two admins working in separate requests.
"""

import threading
from itertools import combinations


def _run_concurrently(app, operations):
    """Start all operations at the same time and collect their results."""
    barrier = threading.Barrier(len(operations))
    results = [None] * len(operations)
    errors = []

    def worker(index, operation):
        with app.app_context():
            barrier.wait()
            try:
                results[index] = operation()
            except Exception as exc:  # surfaced through the assertion below
                errors.append(exc)

    threads = [threading.Thread(target=worker, args=(i, op)) for i, op in enumerate(operations)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert errors == []
    return results


def _assert_no_double_booking(app, vehicle_id):
    """No two confirmed/active reservations of the vehicle overlap."""
    from models.reservation_calendar import project, CalendarFilter
    from models.reservation_interval import overlaps
    from models.reservation_crud import get_reservation_by_id

    with app.app_context():
        events = project(('2026-01-01', '2026-12-31'),
                         CalendarFilter(vehicle_id=vehicle_id, statuses=('confirmed', 'active')))
        held = [get_reservation_by_id(e['id']).interval for e in events]

    for a, b in combinations(held, 2):
        assert not overlaps(a, b)


class TestConcurrentApprovals:
    """Two admins approving overlapping requests at the same moment."""

    def test_only_one_overlapping_approval_wins(self, app, fleet, make_reservation):
        from models.reservation_state import approve_reservation

        first = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12')
        second = make_reservation(fleet['sonata'], '2026-06-11', '2026-06-13')

        results = _run_concurrently(app, [
            lambda: approve_reservation(first, 'park'),
            lambda: approve_reservation(second, 'lee'),
        ])

        outcomes = sorted(r['success'] for r in results)
        assert outcomes == [False, True]
        loser = next(r for r in results if not r['success'])
        assert loser['error'] in ('scheduling_conflict', 'concurrency_conflict')
        _assert_no_double_booking(app, fleet['sonata'])

    def test_approve_and_move_race(self, app, fleet, make_reservation):
        """A move onto a slot racing the approval of a request for that slot."""
        from models.reservation_state import approve_reservation
        from models.reservation_schedule import move_reservation

        held = make_reservation(fleet['sonata'], '2026-06-01', '2026-06-02', status='confirmed')
        request_id = make_reservation(fleet['sonata'], '2026-06-20', '2026-06-22')

        results = _run_concurrently(app, [
            lambda: approve_reservation(request_id, 'park'),
            lambda: move_reservation(held, '2026-06-21', '2026-06-23', 'lee'),
        ])

        assert sum(1 for r in results if r['success']) == 1
        _assert_no_double_booking(app, fleet['sonata'])

    def test_many_concurrent_moves_onto_same_slot(self, app, fleet, make_reservation):
        from models.reservation_schedule import move_reservation

        ids = [
            make_reservation(fleet['sonata'], f'2026-05-{day:02d}', f'2026-05-{day:02d}T12:00',
                             status='confirmed')
            for day in (1, 3, 5, 7)
        ]

        results = _run_concurrently(app, [
            (lambda rid=rid: move_reservation(rid, '2026-06-10', '2026-06-12'))
            for rid in ids
        ])

        assert sum(1 for r in results if r['success']) == 1
        _assert_no_double_booking(app, fleet['sonata'])

    def test_non_overlapping_approvals_all_succeed(self, app, fleet, make_reservation):
        from models.reservation_state import approve_reservation

        first = make_reservation(fleet['sonata'], '2026-06-10T09:00', '2026-06-12T09:00')
        second = make_reservation(fleet['sonata'], '2026-06-12T09:00', '2026-06-14T09:00')

        results = _run_concurrently(app, [
            lambda: approve_reservation(first, 'park'),
            lambda: approve_reservation(second, 'lee'),
        ])

        assert all(r['success'] for r in results)
