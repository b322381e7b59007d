"""
Route tests.
Tests the public API, authentication and admin endpoints.
"""

import pytest

from models.user import create_user


def create_location(client, name='1M House'):
    response = client.post('/admin/locations', json={'name': name})
    assert response.status_code == 201
    return response.get_json()['data']


def create_room(client, location_id, name='Sunrise Suite'):
    response = client.post('/admin/rooms', json={'name': name, 'location_id': location_id})
    assert response.status_code == 201
    return response.get_json()['data']


def booking_payload(room_id, start='2024-05-10', end='2024-05-12', guest='Alice', **extra):
    payload = {'room_id': room_id, 'guest_name': guest, 'start_date': start, 'end_date': end}
    payload.update(extra)
    return payload


class TestPublicRoutes:
    """Routes available without logging in."""

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['status'] == 'ok'
        assert data['app'] == 'RoomBoard'

    def test_index(self, client):
        response = client.get('/')
        assert response.status_code == 200
        assert response.get_json()['success'] is True

    def test_unknown_route_is_json(self, client):
        response = client.get('/nowhere')
        assert response.status_code == 404
        assert response.get_json()['success'] is False

    def test_calendar_seeds_and_shows_default_location(self, client):
        response = client.get('/api/calendar?week=2024-05-15')
        assert response.status_code == 200

        data = response.get_json()['data']
        assert data['location']['name'] == '1M House'
        assert len(data['locations']) == 2
        assert data['week_start'] == '2024-05-13'
        assert data['title'] == 'May 2024'
        assert [row['room']['name'] for row in data['grid']['rows']] == [
            'Sunrise Suite', 'Ocean View Deluxe', 'Garden Retreat'
        ]
        assert len(data['grid']['days']) == 7

    def test_calendar_other_location(self, client):
        locations = client.get('/api/calendar').get_json()['data']['locations']
        annex = next(loc for loc in locations if loc['name'] == 'Hillside Annex')

        response = client.get(f"/api/calendar?location_id={annex['id']}")
        data = response.get_json()['data']

        assert data['location']['id'] == annex['id']
        assert len(data['grid']['rows']) == 2

    def test_calendar_unknown_location(self, client):
        client.get('/api/calendar')
        response = client.get('/api/calendar?location_id=missing')
        assert response.status_code == 404

    def test_calendar_bad_week(self, client):
        response = client.get('/api/calendar?week=soon')
        assert response.status_code == 400

    def test_locations(self, seeded_app, client):
        response = client.get('/api/locations')
        assert response.status_code == 200
        assert response.get_json()['count'] == 2


class TestAuthRoutes:
    """Login, logout and current user."""

    def test_login_success(self, client):
        response = client.post('/login', json={'username': 'admin', 'password': 'admin123'})
        assert response.status_code == 200
        assert response.get_json()['data']['is_admin'] is True

        me = client.get('/me')
        assert me.status_code == 200
        assert me.get_json()['data']['username'] == 'admin'

    def test_login_bad_password(self, client):
        response = client.post('/login', data={'username': 'admin', 'password': 'wrong'})
        assert response.status_code == 401

    def test_login_missing_fields(self, client):
        response = client.post('/login', data={'username': 'admin'})
        assert response.status_code == 400
        assert 'password' in response.get_json()['errors']

    def test_logout(self, authenticated_client):
        response = authenticated_client.post('/logout')
        assert response.status_code == 200
        assert authenticated_client.get('/me').status_code == 401

    def test_csrf_token(self, client):
        response = client.get('/csrf-token')
        assert response.status_code == 200
        assert 'csrf_token' in response.get_json()['data']


class TestAdminAccess:
    """Admin routes require an admin session."""

    @pytest.mark.parametrize('route', [
        '/admin/dashboard', '/admin/locations', '/admin/rooms', '/admin/bookings'
    ])
    def test_requires_login(self, client, route):
        assert client.get(route).status_code == 401

    def test_requires_admin(self, app, client):
        create_user('staff', 'staff@example.com', 'secret1')
        client.post('/login', data={'username': 'staff', 'password': 'secret1'})

        response = client.get('/admin/dashboard')
        assert response.status_code == 403
        assert response.get_json()['success'] is False


class TestAdminLocationsAndRooms:
    """Location and room management."""

    def test_location_crud(self, authenticated_client):
        location = create_location(authenticated_client, '  Lakeside  ')
        assert location['name'] == 'Lakeside'

        response = authenticated_client.put(f"/admin/locations/{location['id']}", json={'name': 'Lake House'})
        assert response.status_code == 200

        listed = authenticated_client.get('/admin/locations').get_json()['data']
        assert listed == [{'id': location['id'], 'name': 'Lake House', 'room_count': 0}]

        response = authenticated_client.delete(f"/admin/locations/{location['id']}")
        assert response.status_code == 200
        assert authenticated_client.get('/admin/locations').get_json()['data'] == []

    def test_location_name_required(self, authenticated_client):
        response = authenticated_client.post('/admin/locations', json={'name': '  '})
        assert response.status_code == 400
        assert 'name' in response.get_json()['errors']

    def test_update_missing_location(self, authenticated_client):
        response = authenticated_client.put('/admin/locations/missing', json={'name': 'x'})
        assert response.status_code == 404

    def test_delete_location_with_rooms(self, authenticated_client):
        location = create_location(authenticated_client)
        create_room(authenticated_client, location['id'])

        response = authenticated_client.delete(f"/admin/locations/{location['id']}")
        assert response.status_code == 409

    def test_room_crud(self, authenticated_client):
        house = create_location(authenticated_client)
        annex = create_location(authenticated_client, 'Hillside Annex')
        room = create_room(authenticated_client, house['id'])

        response = authenticated_client.put(f"/admin/rooms/{room['id']}", json={'location_id': annex['id']})
        assert response.status_code == 200
        assert response.get_json()['data']['name'] == 'Sunrise Suite'

        rooms = authenticated_client.get(f"/admin/rooms?location_id={annex['id']}").get_json()['data']
        assert [r['location_name'] for r in rooms] == ['Hillside Annex']

        assert authenticated_client.delete(f"/admin/rooms/{room['id']}").status_code == 200

    def test_room_in_missing_location(self, authenticated_client):
        response = authenticated_client.post('/admin/rooms', json={'name': 'Suite', 'location_id': 'missing'})
        assert response.status_code == 404

    def test_room_requires_fields(self, authenticated_client):
        response = authenticated_client.post('/admin/rooms', json={})
        assert response.status_code == 400
        assert set(response.get_json()['errors']) == {'name', 'location_id'}


class TestAdminBookings:
    """Booking management through the mutation workflow."""

    def setup_room(self, client):
        location = create_location(client)
        return location, create_room(client, location['id'])

    def test_create_booking(self, authenticated_client):
        _, room = self.setup_room(authenticated_client)

        response = authenticated_client.post('/admin/bookings', json=booking_payload(room['id']))
        assert response.status_code == 201

        booking = response.get_json()['data']
        assert booking['start_date'] == '2024-05-10'
        assert booking['status'] == 'booked'

    def test_validation_errors(self, authenticated_client):
        _, room = self.setup_room(authenticated_client)

        response = authenticated_client.post('/admin/bookings', json=booking_payload(
            room['id'], start='2024-05-12', end='2024-05-10', guest=''
        ))
        assert response.status_code == 400
        assert set(response.get_json()['errors']) == {'guest_name', 'end_date'}

    @pytest.mark.parametrize('start', [1e20, '2024-05-10garbage'])
    def test_malformed_date_is_rejected(self, authenticated_client, start):
        _, room = self.setup_room(authenticated_client)

        response = authenticated_client.post('/admin/bookings', json=booking_payload(room['id'], start=start))
        assert response.status_code == 400
        assert set(response.get_json()['errors']) == {'start_date'}
        assert authenticated_client.get('/admin/bookings').get_json()['count'] == 0

    def test_overlap_needs_confirmation(self, authenticated_client):
        _, room = self.setup_room(authenticated_client)
        authenticated_client.post('/admin/bookings', json=booking_payload(room['id']))

        response = authenticated_client.post('/admin/bookings', json=booking_payload(
            room['id'], start='2024-05-12', end='2024-05-14', guest='Bob'
        ))
        assert response.status_code == 409
        conflict = response.get_json()['conflict']
        assert conflict['booking']['guest_name'] == 'Alice'
        assert '2024-05-10 to 2024-05-12' in conflict['message']

        response = authenticated_client.post('/admin/bookings', json=booking_payload(
            room['id'], start='2024-05-12', end='2024-05-14', guest='Bob', confirm_overlap=True
        ))
        assert response.status_code == 201

        bookings = authenticated_client.get(f"/admin/bookings?room_id={room['id']}").get_json()['data']
        assert [b['guest_name'] for b in bookings] == ['Alice', 'Bob']

    def test_update_booking(self, authenticated_client):
        location, room = self.setup_room(authenticated_client)
        booking = authenticated_client.post(
            '/admin/bookings', json=booking_payload(room['id'])
        ).get_json()['data']

        response = authenticated_client.put(f"/admin/bookings/{booking['id']}", json={
            'end_date': '2024-05-15', 'status': 'maintenance'
        })
        assert response.status_code == 200

        updated = response.get_json()['data']
        assert updated['end_date'] == '2024-05-15'
        assert updated['guest_name'] == 'Alice'
        assert updated['status'] == 'maintenance'

        by_location = authenticated_client.get(f"/admin/bookings?location_id={location['id']}")
        assert by_location.get_json()['count'] == 1

    def test_update_missing_booking(self, authenticated_client):
        response = authenticated_client.put('/admin/bookings/missing', json={'guest_name': 'x'})
        assert response.status_code == 404

    def test_booking_for_missing_room(self, authenticated_client):
        response = authenticated_client.post('/admin/bookings', json=booking_payload('missing'))
        assert response.status_code == 404

    def test_delete_booking(self, authenticated_client):
        _, room = self.setup_room(authenticated_client)
        booking = authenticated_client.post(
            '/admin/bookings', json=booking_payload(room['id'])
        ).get_json()['data']

        assert authenticated_client.delete(f"/admin/bookings/{booking['id']}").status_code == 200
        assert authenticated_client.delete(f"/admin/bookings/{booking['id']}").status_code == 404

    def test_dashboard_counts(self, seeded_app, authenticated_client):
        response = authenticated_client.get('/admin/dashboard')
        assert response.status_code == 200
        assert response.get_json()['data'] == {'locations': 2, 'rooms': 5, 'bookings': 3}
