# services/booking-service/src/tests/integration/test_api.py
"""
Integration Tests for Facility Booking API

Tests API endpoints with full request/response cycle.
"""

import uuid
from datetime import timedelta
from unittest.mock import patch

import pytest
from django.urls import resolve
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from apps.api.views import ReservationViewSet
from apps.core.models import Facility, MaintenanceWindow, Reservation
from apps.core.services.exceptions import StorageUnavailableError


class TestHealthEndpoints:

    def setup_method(self):
        self.client = APIClient()

    def test_health(self):
        response = self.client.get('/health/')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['status'] == 'healthy'

    def test_api_routes_resolve(self):
        """Test the URL configuration and the API views load together."""
        assert resolve('/api/v1/reservations/').func.cls is ReservationViewSet
        assert resolve('/api/v1/availability/').url_name

    @pytest.mark.django_db
    def test_readiness(self):
        response = self.client.get('/health/ready/')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['checks']['database'] == 'connected'


@pytest.mark.django_db
class TestAuthentication:

    def setup_method(self):
        self.client = APIClient()

    def test_missing_token(self):
        response = self.client.get('/api/v1/reservations/')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['success'] is False
        assert response.data['error']['code'] == 'UNAUTHORIZED'

    def test_invalid_token(self):
        response = self.client.get(
            '/api/v1/reservations/',
            HTTP_AUTHORIZATION='Bearer not-a-token'
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_request_id_echoed(self, auth_headers):
        response = self.client.get(
            '/api/v1/reservations/',
            HTTP_X_REQUEST_ID='req-123',
            **auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response['X-Request-ID'] == 'req-123'


@pytest.mark.django_db
class TestReservationAPI:
    """Integration tests for reservation endpoints."""

    def setup_method(self):
        self.client = APIClient()

    def booking_data(self, facility, start, end, **extra):
        data = {
            'facility_id': str(facility.id),
            'start_time': start.isoformat(),
            'end_time': end.isoformat(),
        }
        data.update(extra)
        return data

    def test_create_reservation(self, auth_headers, user_id, create_facility, tomorrow_at):
        """Test booking two hours at 100 per hour."""
        facility = create_facility()

        response = self.client.post(
            '/api/v1/reservations/',
            data=self.booking_data(facility, tomorrow_at(10), tomorrow_at(12)),
            format='json',
            **auth_headers
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'confirmed'
        assert response.data['total_price'] == '200.00'
        assert response.data['requester_id'] == str(user_id)
        assert response.data['reservation_number'].startswith('RES-')

    def test_overlap_is_conflict(self, auth_headers, create_facility, create_reservation, tomorrow_at):
        facility = create_facility()
        create_reservation(facility, tomorrow_at(14), tomorrow_at(16))

        response = self.client.post(
            '/api/v1/reservations/',
            data=self.booking_data(facility, tomorrow_at(15), tomorrow_at(17)),
            format='json',
            **auth_headers
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error']['code'] == 'OVERLAP'
        assert Reservation.objects.count() == 1

    def test_too_short_is_bad_request(self, auth_headers, create_facility, tomorrow_at):
        facility = create_facility()

        response = self.client.post(
            '/api/v1/reservations/',
            data=self.booking_data(facility, tomorrow_at(10), tomorrow_at(10, 20)),
            format='json',
            **auth_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'TOO_SHORT'
        assert response.data['error']['message'] == 'Bookings must last at least 30 minutes.'

    def test_too_short_message_follows_setting(self, settings, auth_headers, create_facility, tomorrow_at):
        settings.FACILITY_BOOKING = {**settings.FACILITY_BOOKING, 'MIN_BOOKING_MINUTES': 45}
        facility = create_facility()

        response = self.client.post(
            '/api/v1/reservations/',
            data=self.booking_data(facility, tomorrow_at(10), tomorrow_at(10, 30)),
            format='json',
            **auth_headers
        )

        assert response.data['error']['code'] == 'TOO_SHORT'
        assert response.data['error']['message'] == 'Bookings must last at least 45 minutes.'

    def test_past_date_is_bad_request(self, auth_headers, create_facility):
        facility = create_facility()
        start = timezone.now() - timedelta(days=2)

        response = self.client.post(
            '/api/v1/reservations/',
            data=self.booking_data(facility, start, start + timedelta(hours=1)),
            format='json',
            **auth_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'PAST_DATE'

    def test_unknown_facility(self, auth_headers, tomorrow_at):
        response = self.client.post(
            '/api/v1/reservations/',
            data={
                'facility_id': str(uuid.uuid4()),
                'start_time': tomorrow_at(10).isoformat(),
                'end_time': tomorrow_at(11).isoformat(),
            },
            format='json',
            **auth_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error']['code'] == 'NOT_FOUND'

    def test_missing_fields(self, auth_headers):
        response = self.client.post('/api/v1/reservations/', data={}, format='json', **auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'facility_id' in response.data['error']['details']

    def test_validate_only(self, auth_headers, create_facility, tomorrow_at):
        facility = create_facility()

        response = self.client.post(
            '/api/v1/reservations/',
            data=self.booking_data(
                facility, tomorrow_at(10), tomorrow_at(12, 30), validate_only=True
            ),
            format='json',
            **auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'valid': True, 'total_price': '250.00'}
        assert Reservation.objects.count() == 0

    def test_storage_unavailable(self, auth_headers, create_facility, tomorrow_at):
        facility = create_facility()

        with patch(
            'apps.core.services.storage.DjangoReservationStore.get_facility',
            side_effect=StorageUnavailableError('connection refused')
        ):
            response = self.client.post(
                '/api/v1/reservations/',
                data=self.booking_data(facility, tomorrow_at(10), tomorrow_at(11)),
                format='json',
                **auth_headers
            )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['error']['code'] == 'STORAGE_UNAVAILABLE'
        assert response.data['error']['details'] is None

    def test_user_cannot_book_for_others(self, auth_headers, create_facility, tomorrow_at):
        facility = create_facility()

        response = self.client.post(
            '/api/v1/reservations/',
            data=self.booking_data(
                facility, tomorrow_at(10), tomorrow_at(11), requester_id=str(uuid.uuid4())
            ),
            format='json',
            **auth_headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_books_for_user(self, admin_headers, user_id, create_facility, tomorrow_at):
        facility = create_facility()

        response = self.client.post(
            '/api/v1/reservations/',
            data=self.booking_data(
                facility, tomorrow_at(10), tomorrow_at(11),
                requester_id=str(user_id), status='pending'
            ),
            format='json',
            **admin_headers
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['requester_id'] == str(user_id)
        assert response.data['status'] == 'pending'

    def test_list_only_own(self, auth_headers, user_id, create_facility, create_reservation, tomorrow_at):
        facility = create_facility()
        mine = create_reservation(facility, tomorrow_at(10), tomorrow_at(11), requester_id=user_id)
        create_reservation(facility, tomorrow_at(12), tomorrow_at(13))

        response = self.client.get('/api/v1/reservations/', **auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert [r['id'] for r in response.data['results']] == [str(mine.id)]

    def test_admin_lists_all(self, admin_headers, create_facility, create_reservation, tomorrow_at):
        facility = create_facility()
        create_reservation(facility, tomorrow_at(10), tomorrow_at(11))
        create_reservation(facility, tomorrow_at(12), tomorrow_at(13))

        response = self.client.get('/api/v1/reservations/', **admin_headers)

        assert response.data['count'] == 2

    def test_filter_by_status(self, admin_headers, create_facility, create_reservation, tomorrow_at):
        facility = create_facility()
        create_reservation(facility, tomorrow_at(10), tomorrow_at(11))
        create_reservation(facility, tomorrow_at(12), tomorrow_at(13),
                           status=Reservation.Status.CANCELLED)

        response = self.client.get('/api/v1/reservations/?status=cancelled', **admin_headers)

        assert response.data['count'] == 1
        assert response.data['results'][0]['status'] == 'cancelled'

    def test_other_users_reservation_hidden(self, auth_headers, create_facility,
                                            create_reservation, tomorrow_at):
        reservation = create_reservation(create_facility(), tomorrow_at(10), tomorrow_at(11))

        response = self.client.get(f'/api/v1/reservations/{reservation.id}/', **auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestReservationStatusAPI:
    """Integration tests for status changes."""

    def setup_method(self):
        self.client = APIClient()

    def test_cancel_own(self, auth_headers, user_id, create_facility, create_reservation, tomorrow_at):
        reservation = create_reservation(
            create_facility(), tomorrow_at(10), tomorrow_at(11), requester_id=user_id
        )

        response = self.client.post(
            f'/api/v1/reservations/{reservation.id}/status/',
            data={'status': 'cancelled', 'reason': 'Rain'},
            format='json',
            **auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'cancelled'
        assert response.data['cancellation_reason'] == 'Rain'
        assert response.data['cancelled_at'] is not None

    def test_user_cannot_confirm(self, auth_headers, user_id, create_facility,
                                 create_reservation, tomorrow_at):
        reservation = create_reservation(
            create_facility(), tomorrow_at(10), tomorrow_at(11),
            requester_id=user_id, status=Reservation.Status.PENDING
        )

        response = self.client.post(
            f'/api/v1/reservations/{reservation.id}/status/',
            data={'status': 'confirmed'},
            format='json',
            **auth_headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_invalid_transition(self, admin_headers, create_facility, create_reservation, tomorrow_at):
        reservation = create_reservation(create_facility(), tomorrow_at(10), tomorrow_at(11))

        response = self.client.post(
            f'/api/v1/reservations/{reservation.id}/status/',
            data={'status': 'pending'},
            format='json',
            **admin_headers
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error']['code'] == 'INVALID_TRANSITION'

    def test_reactivation_blocked_by_new_booking(self, admin_headers, create_facility,
                                                  create_reservation, tomorrow_at):
        facility = create_facility()
        cancelled = create_reservation(
            facility, tomorrow_at(10), tomorrow_at(12), status=Reservation.Status.CANCELLED
        )
        create_reservation(facility, tomorrow_at(11), tomorrow_at(12))

        response = self.client.post(
            f'/api/v1/reservations/{cancelled.id}/status/',
            data={'status': 'confirmed'},
            format='json',
            **admin_headers
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error']['code'] == 'OVERLAP'

    def test_admin_reactivates(self, admin_headers, create_facility, create_reservation, tomorrow_at):
        cancelled = create_reservation(
            create_facility(), tomorrow_at(10), tomorrow_at(12), status=Reservation.Status.CANCELLED
        )

        response = self.client.post(
            f'/api/v1/reservations/{cancelled.id}/status/',
            data={'status': 'confirmed'},
            format='json',
            **admin_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'confirmed'


@pytest.mark.django_db
class TestAvailabilityAPI:

    def setup_method(self):
        self.client = APIClient()

    def test_marks_booked_slots(self, auth_headers, create_facility, create_reservation, tomorrow_at):
        facility = create_facility()
        create_reservation(facility, tomorrow_at(10, 30), tomorrow_at(11, 30))

        response = self.client.get(
            '/api/v1/availability/',
            {'date': tomorrow_at(0).date().isoformat(), 'facility_id': str(facility.id)},
            **auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        report = response.data['facilities'][0]
        taken = [slot['hour'] for slot in report['slots'] if not slot['available']]
        assert taken == [10, 11]
        assert report['available_count'] == len(report['slots']) - 2

    def test_all_active_facilities(self, auth_headers, create_facility, tomorrow_at):
        create_facility(name='A Court')
        create_facility(name='B Court')
        create_facility(name='Closed', is_active=False)

        response = self.client.get(
            '/api/v1/availability/',
            {'date': tomorrow_at(0).date().isoformat()},
            **auth_headers
        )

        assert [f['name'] for f in response.data['facilities']] == ['A Court', 'B Court']

    def test_date_required(self, auth_headers):
        response = self.client.get('/api/v1/availability/', **auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_facility(self, auth_headers, tomorrow_at):
        response = self.client.get(
            '/api/v1/availability/',
            {'date': tomorrow_at(0).date().isoformat(), 'facility_id': str(uuid.uuid4())},
            **auth_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestReportAPI:

    def setup_method(self):
        self.client = APIClient()

    def test_admin_only(self, auth_headers):
        response = self.client.get('/api/v1/reports/', {'period': 'month', 'date': '2025-06-01'},
                                   **auth_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_day_report(self, admin_headers, create_facility, create_reservation, tomorrow_at):
        facility = create_facility(name='North Pitch')
        create_reservation(facility, tomorrow_at(10), tomorrow_at(12))

        day = tomorrow_at(0).date().isoformat()
        response = self.client.get('/api/v1/reports/', {'period': 'day', 'date': day}, **admin_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['period'] == day
        summary = response.data['summary']
        assert summary['total_reservations'] == 1
        assert summary['total_revenue'] == '100.00'
        assert summary['top_facility'] == 'North Pitch'
        assert response.data['per_facility'][0]['hours_booked'] == 2.0

    def test_month_label(self, admin_headers):
        response = self.client.get('/api/v1/reports/', {'period': 'month', 'date': '2024-02-10'},
                                   **admin_headers)

        assert response.data['period'] == '2024-02'
        assert response.data['end_date'] == '2024-02-29'

    def test_range_requires_dates(self, admin_headers):
        response = self.client.get('/api/v1/reports/', {'period': 'range'}, **admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestMaintenanceAPI:

    def setup_method(self):
        self.client = APIClient()

    def test_schedule(self, admin_headers, admin_id, create_facility, tomorrow_at):
        facility = create_facility()

        response = self.client.post(
            '/api/v1/maintenance/',
            data={
                'facility_id': str(facility.id),
                'start_time': tomorrow_at(14).isoformat(),
                'end_time': tomorrow_at(16).isoformat(),
                'description': 'Line repainting',
            },
            format='json',
            **admin_headers
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'scheduled'
        assert response.data['created_by'] == str(admin_id)

    def test_overlapping_reservation(self, admin_headers, create_facility, create_reservation, tomorrow_at):
        facility = create_facility()
        create_reservation(facility, tomorrow_at(15), tomorrow_at(17))

        response = self.client.post(
            '/api/v1/maintenance/',
            data={
                'facility_id': str(facility.id),
                'start_time': tomorrow_at(14).isoformat(),
                'end_time': tomorrow_at(16).isoformat(),
            },
            format='json',
            **admin_headers
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert MaintenanceWindow.objects.count() == 0

    def test_user_cannot_schedule(self, auth_headers, create_facility, tomorrow_at):
        facility = create_facility()

        response = self.client.post(
            '/api/v1/maintenance/',
            data={
                'facility_id': str(facility.id),
                'start_time': tomorrow_at(14).isoformat(),
                'end_time': tomorrow_at(16).isoformat(),
            },
            format='json',
            **auth_headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_maintenance_blocks_booking(self, auth_headers, create_facility,
                                        create_maintenance, tomorrow_at):
        facility = create_facility()
        create_maintenance(facility, tomorrow_at(14), tomorrow_at(16))

        response = self.client.post(
            '/api/v1/reservations/',
            data={
                'facility_id': str(facility.id),
                'start_time': tomorrow_at(15).isoformat(),
                'end_time': tomorrow_at(17).isoformat(),
            },
            format='json',
            **auth_headers
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_finish_active_window(self, admin_headers, create_facility, create_maintenance):
        now = timezone.now()
        window = create_maintenance(create_facility(), now - timedelta(hours=1), now + timedelta(hours=2))

        response = self.client.post(f'/api/v1/maintenance/{window.id}/finish/', **admin_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'finished'

    def test_finish_scheduled_window(self, admin_headers, create_facility, create_maintenance, tomorrow_at):
        window = create_maintenance(create_facility(), tomorrow_at(14), tomorrow_at(16))

        response = self.client.post(f'/api/v1/maintenance/{window.id}/finish/', **admin_headers)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error']['code'] == 'INVALID_TRANSITION'


@pytest.mark.django_db
class TestFacilityAPI:

    def setup_method(self):
        self.client = APIClient()

    def test_admin_creates_facility(self, admin_headers):
        response = self.client.post(
            '/api/v1/facilities/',
            data={'name': 'East Court', 'category': 'basketball', 'hourly_rate': '80.00'},
            format='json',
            **admin_headers
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['category_display'] == 'Basketball'

    def test_user_cannot_create(self, auth_headers):
        response = self.client.post(
            '/api/v1/facilities/',
            data={'name': 'East Court', 'category': 'basketball', 'hourly_rate': '80.00'},
            format='json',
            **auth_headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error']['code'] == 'FORBIDDEN'

    def test_users_see_active_only(self, auth_headers, create_facility):
        create_facility(name='Open Court')
        create_facility(name='Closed Court', is_active=False)

        response = self.client.get('/api/v1/facilities/', **auth_headers)

        assert [f['name'] for f in response.data['results']] == ['Open Court']

    def test_delete_with_reservations_deactivates(self, admin_headers, create_facility,
                                                  create_reservation, tomorrow_at):
        facility = create_facility()
        create_reservation(facility, tomorrow_at(10), tomorrow_at(11))

        response = self.client.delete(f'/api/v1/facilities/{facility.id}/', **admin_headers)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        facility.refresh_from_db()
        assert not facility.is_active

    def test_deactivated_facility_not_bookable(self, admin_headers, auth_headers, create_facility,
                                               create_reservation, tomorrow_at):
        facility = create_facility()
        create_reservation(facility, tomorrow_at(10), tomorrow_at(11))
        self.client.delete(f'/api/v1/facilities/{facility.id}/', **admin_headers)

        response = self.client.post(
            '/api/v1/reservations/',
            data={
                'facility_id': str(facility.id),
                'start_time': tomorrow_at(14).isoformat(),
                'end_time': tomorrow_at(15).isoformat(),
            },
            format='json',
            **auth_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error']['code'] == 'NOT_FOUND'
        assert Reservation.objects.filter(facility=facility).count() == 1

        availability = self.client.get(
            '/api/v1/availability/',
            {'date': tomorrow_at(0).date().isoformat(), 'facility_id': str(facility.id)},
            **auth_headers
        )
        assert availability.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_without_reservations(self, admin_headers, create_facility):
        facility = create_facility()

        response = self.client.delete(f'/api/v1/facilities/{facility.id}/', **admin_headers)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Facility.objects.filter(id=facility.id).exists()

    def test_operating_hours_override(self, admin_headers, create_facility):
        facility = create_facility()

        response = self.client.post(
            '/api/v1/operating-hours/',
            data={
                'facility': str(facility.id),
                'day_of_week': 0,
                'open_time': '10:00',
                'close_time': '14:00',
            },
            format='json',
            **admin_headers
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['day_name'] == 'Sunday'

    def test_operating_hours_must_close_after_open(self, admin_headers, create_facility):
        facility = create_facility()

        response = self.client.post(
            '/api/v1/operating-hours/',
            data={
                'facility': str(facility.id),
                'day_of_week': 0,
                'open_time': '14:00',
                'close_time': '10:00',
            },
            format='json',
            **admin_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
