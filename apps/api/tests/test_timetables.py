"""
Tests for doctor timetable slots.

/api/v1/timetables/ - doctors manage their own slots, administrators
manage slots for any doctor.
"""
import pytest

from apps.scheduling.models import TimetableSlot


@pytest.mark.django_db
class TestCreateSlot:
    """POST /api/v1/timetables/"""

    def test_doctor_creates_own_slot(self, client_for, doctor, clinic, in_days):
        """Doctor creates a free slot for themselves."""
        when = in_days(7)
        response = client_for(doctor).post(
            '/api/v1/timetables/',
            {'datetime': when.isoformat(), 'clinic_id': str(clinic.id)},
            format='json'
        )

        assert response.status_code == 200
        slot = TimetableSlot.objects.get(id=response.data['id'])
        assert slot.doctor_id == doctor.id
        assert slot.scheduled is False

    def test_duplicate_datetime_rejected(self, client_for, doctor, slot):
        """Second slot for the same (doctor, datetime) is a 400."""
        response = client_for(doctor).post(
            '/api/v1/timetables/',
            {'datetime': slot.datetime.isoformat(), 'clinic_id': str(slot.clinic_id)},
            format='json'
        )

        assert response.status_code == 400
        assert response.data['error'] == 'Datetime already registered'
        assert TimetableSlot.objects.filter(doctor=doctor).count() == 1

    def test_doctor_cannot_create_for_other_doctor(self, client_for, doctor, other_doctor, clinic, in_days):
        response = client_for(doctor).post(
            '/api/v1/timetables/',
            {'datetime': in_days(7).isoformat(), 'clinic_id': str(clinic.id), 'doctor_id': str(other_doctor.id)},
            format='json'
        )

        assert response.status_code == 401
        assert not TimetableSlot.objects.exists()

    def test_administrator_must_send_doctor_id(self, client_for, administrator, clinic, in_days):
        response = client_for(administrator).post(
            '/api/v1/timetables/',
            {'datetime': in_days(7).isoformat(), 'clinic_id': str(clinic.id)},
            format='json'
        )

        assert response.status_code == 400
        assert response.data['error'] == 'Doctor id required'

    def test_administrator_creates_for_doctor(self, client_for, administrator, doctor, clinic, in_days):
        response = client_for(administrator).post(
            '/api/v1/timetables/',
            {'datetime': in_days(7).isoformat(), 'clinic_id': str(clinic.id), 'doctor_id': str(doctor.id)},
            format='json'
        )

        assert response.status_code == 200
        assert TimetableSlot.objects.get(id=response.data['id']).doctor_id == doctor.id

    def test_target_must_be_doctor(self, client_for, administrator, patient, clinic, in_days):
        response = client_for(administrator).post(
            '/api/v1/timetables/',
            {'datetime': in_days(7).isoformat(), 'clinic_id': str(clinic.id), 'doctor_id': str(patient.id)},
            format='json'
        )

        assert response.status_code == 400

    def test_unknown_clinic(self, client_for, doctor, in_days):
        response = client_for(doctor).post(
            '/api/v1/timetables/',
            {'datetime': in_days(7).isoformat(), 'clinic_id': '00000000-0000-0000-0000-000000000000'},
            format='json'
        )

        assert response.status_code == 404

    def test_patient_blocked_by_route_guard(self, client_for, patient, clinic, in_days):
        response = client_for(patient).post(
            '/api/v1/timetables/',
            {'datetime': in_days(7).isoformat(), 'clinic_id': str(clinic.id)},
            format='json'
        )

        assert response.status_code == 403


@pytest.mark.django_db
class TestListAndManageSlots:
    """GET/PATCH/DELETE /api/v1/timetables/"""

    def test_doctor_lists_only_own_slots(self, client_for, doctor, other_doctor, clinic, slot, in_days):
        TimetableSlot.objects.create(doctor=other_doctor, clinic=clinic, datetime=in_days(8))

        response = client_for(doctor).get('/api/v1/timetables/')

        assert response.status_code == 200
        assert [item['id'] for item in response.data['results']] == [str(slot.id)]

    def test_administrator_lists_all(self, client_for, administrator, other_doctor, clinic, slot, in_days):
        TimetableSlot.objects.create(doctor=other_doctor, clinic=clinic, datetime=in_days(8))

        response = client_for(administrator).get('/api/v1/timetables/')

        assert response.data['count'] == 2

    def test_other_doctor_gets_401(self, client_for, other_doctor, slot):
        response = client_for(other_doctor).delete(f'/api/v1/timetables/{slot.id}/')

        assert response.status_code == 401
        assert TimetableSlot.objects.filter(id=slot.id).exists()

    def test_missing_slot_is_404(self, client_for, doctor):
        response = client_for(doctor).get('/api/v1/timetables/00000000-0000-0000-0000-000000000000/')

        assert response.status_code == 404

    def test_update_moves_free_slot(self, client_for, doctor, slot, in_days):
        new_time = in_days(12)
        response = client_for(doctor).patch(
            f'/api/v1/timetables/{slot.id}/',
            {'datetime': new_time.isoformat()},
            format='json'
        )

        assert response.status_code == 200
        slot.refresh_from_db()
        assert slot.datetime == new_time

    def test_scheduled_slot_cannot_change(self, client_for, doctor, consultation, slot):
        """A slot held by a consultation is neither moved nor deleted."""
        client = client_for(doctor)

        assert client.delete(f'/api/v1/timetables/{slot.id}/').status_code == 400
        response = client.patch(
            f'/api/v1/timetables/{slot.id}/',
            {'clinic_id': str(slot.clinic_id)},
            format='json'
        )
        assert response.status_code == 400

    def test_delete_free_slot(self, client_for, doctor, slot):
        response = client_for(doctor).delete(f'/api/v1/timetables/{slot.id}/')

        assert response.status_code == 204
        assert not TimetableSlot.objects.filter(id=slot.id).exists()
