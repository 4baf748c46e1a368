"""
Tests for the calendar projection.
"""

import pytest


class TestProject:
    """Tests for project."""

    def test_event_shape(self, app, fleet, make_reservation):
        from models.reservation_calendar import project

        reservation_id = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12',
                                          status='confirmed', guest_name='Lee Jiyeon',
                                          total_amount=210000)

        with app.app_context():
            events = project(('2026-06-01', '2026-06-30'))

        assert len(events) == 1
        event = events[0]
        assert event['id'] == reservation_id
        assert event['title'] == 'Lee Jiyeon'
        assert event['start'] == '2026-06-10T09:00'
        assert event['end'] == '2026-06-12T18:00'
        assert event['status'] == 'confirmed'
        assert event['background_color'] == '#3b82f6'
        assert event['border_color'] == '#3b82f6'
        assert event['text_color'] == '#ffffff'
        assert event['vehicle_info'] == 'Hyundai Sonata'
        props = event['extended_props']
        assert props['reservation_number'].startswith('RV260610')
        assert props['vehicle_number'] == '11GA1111'
        assert props['pickup_location'] == 'Gangnam Branch'
        assert props['return_location'] == 'Gangnam Branch'
        assert props['total_amount'] == 210000

    def test_default_filter_hides_terminal(self, app, fleet, make_reservation):
        from models.reservation_calendar import project

        shown = {
            make_reservation(fleet['sonata'], '2026-06-01', '2026-06-02', status='pending'),
            make_reservation(fleet['sonata'], '2026-06-03', '2026-06-04', status='confirmed'),
            make_reservation(fleet['sonata'], '2026-06-05', '2026-06-06', status='active'),
        }
        make_reservation(fleet['sonata'], '2026-06-07', '2026-06-08', status='completed')
        make_reservation(fleet['sonata'], '2026-06-09', '2026-06-10', status='cancelled')

        with app.app_context():
            events = project(('2026-06-01', '2026-06-30'))

        assert {e['id'] for e in events} == shown

    def test_status_filter(self, app, fleet, make_reservation):
        from models.reservation_calendar import project, CalendarFilter

        make_reservation(fleet['sonata'], '2026-06-01', '2026-06-02', status='pending')
        cancelled = make_reservation(fleet['sonata'], '2026-06-09', '2026-06-10',
                                     status='cancelled')

        with app.app_context():
            events = project(('2026-06-01', '2026-06-30'),
                             CalendarFilter(statuses=('cancelled',)))

        assert [e['id'] for e in events] == [cancelled]
        assert events[0]['background_color'] == '#ef4444'

    def test_location_filter_uses_vehicle_home(self, app, fleet, make_reservation):
        from models.reservation_calendar import project, CalendarFilter

        gangnam = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12')
        make_reservation(fleet['tucson'], '2026-06-10', '2026-06-12')

        with app.app_context():
            events = project(('2026-06-01', '2026-06-30'),
                             CalendarFilter(location_id=fleet['location_ids'][0]))

        assert [e['id'] for e in events] == [gangnam]

    def test_vehicle_filter(self, app, fleet, make_reservation):
        from models.reservation_calendar import project, CalendarFilter

        make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12')
        avante = make_reservation(fleet['avante'], '2026-06-10', '2026-06-12')

        with app.app_context():
            events = project(('2026-06-01', '2026-06-30'),
                             CalendarFilter(vehicle_id=fleet['avante']))

        assert [e['id'] for e in events] == [avante]

    def test_window_intersection(self, app, fleet, make_reservation):
        """Reservations crossing the window edges are included, outside ones are not."""
        from models.reservation_calendar import project

        crossing_start = make_reservation(fleet['sonata'], '2026-05-30', '2026-06-02')
        crossing_end = make_reservation(fleet['avante'], '2026-06-29', '2026-07-03')
        make_reservation(fleet['tucson'], '2026-05-01', '2026-05-03')
        make_reservation(fleet['tucson'], '2026-07-05', '2026-07-06')

        with app.app_context():
            events = project(('2026-06-01', '2026-06-30'))

        assert [e['id'] for e in events] == [crossing_start, crossing_end]

    def test_ordered_by_start_then_id(self, app, fleet, make_reservation):
        from models.reservation_calendar import project

        late = make_reservation(fleet['sonata'], '2026-06-15', '2026-06-16')
        tie_a = make_reservation(fleet['avante'], '2026-06-10', '2026-06-11')
        tie_b = make_reservation(fleet['tucson'], '2026-06-10', '2026-06-11')

        with app.app_context():
            events = project(('2026-06-01', '2026-06-30'))

        assert [e['id'] for e in events] == [tie_a, tie_b, late]

    def test_projection_is_read_only(self, app, fleet, make_reservation):
        from models.reservation_calendar import project
        from models.reservation_crud import get_reservation_by_id

        reservation_id = make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12')

        with app.app_context():
            before = get_reservation_by_id(reservation_id)
            project(('2026-06-01', '2026-06-30'))
            assert get_reservation_by_id(reservation_id) == before

    def test_empty_status_set(self, app, fleet, make_reservation):
        from models.reservation_calendar import project, CalendarFilter

        make_reservation(fleet['sonata'], '2026-06-10', '2026-06-12')

        with app.app_context():
            assert project(('2026-06-01', '2026-06-30'), CalendarFilter(statuses=())) == []

    def test_inverted_window_rejected(self, app):
        from models.reservation_calendar import project
        from models.reservation_errors import ValidationError

        with app.app_context():
            with pytest.raises(ValidationError):
                project(('2026-06-30', '2026-06-01'))

    def test_unknown_status_in_filter(self, app):
        from models.reservation_calendar import CalendarFilter
        from models.reservation_errors import ValidationError

        with app.app_context():
            with pytest.raises(ValidationError):
                CalendarFilter(statuses=('parked',))
