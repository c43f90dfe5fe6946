"""
Tests for clinical records: diagnostics, prescriptions, referrals,
requested exams and exam results.

Only the consultation's doctor writes; anyone else gets a 401 and
nothing is stored.
"""
import uuid

import pytest

from apps.clinical.models import Diagnostic, ExamRequest, ExamResult, Prescription, Referral
from apps.documents.models import File


@pytest.fixture
def diagnostic(consultation, condition):
    return Diagnostic.objects.create(
        consultation=consultation,
        report='Irregular heartbeat under stress',
        condition=condition,
    )


@pytest.fixture
def prescription_payload(diagnostic, medicine, in_days):
    return {
        'diagnostic_id': str(diagnostic.id),
        'medicine_id': str(medicine.id),
        'expires_on': in_days(30).isoformat(),
        'medicine_amount': 2,
        'medicine_frequency': 8,
        'medicine_frequency_unit': 'HOUR',
    }


def make_file(name='report.pdf'):
    return File.objects.create(
        file=f'files/{uuid.uuid4().hex[:12]}_{name}',
        name=name,
        type='application',
        subtype='pdf',
        size_bytes=128,
    )


@pytest.mark.django_db
class TestDiagnostic:
    """POST/GET /api/v1/diagnostics/"""

    def test_doctor_records_diagnostic(self, client_for, doctor, consultation, condition):
        response = client_for(doctor).post(
            '/api/v1/diagnostics/',
            {'consultation_id': str(consultation.id), 'report': 'Stable', 'condition_id': str(condition.id)},
            format='json'
        )

        assert response.status_code == 200
        assert Diagnostic.objects.get(consultation=consultation).report == 'Stable'

    def test_only_one_per_consultation(self, client_for, doctor, diagnostic, condition):
        response = client_for(doctor).post(
            '/api/v1/diagnostics/',
            {
                'consultation_id': str(diagnostic.consultation_id),
                'report': 'Again',
                'condition_id': str(condition.id),
            },
            format='json'
        )

        assert response.status_code == 400
        assert response.data['error'] == 'Diagnostic already exists'

    def test_other_doctor_gets_401(self, client_for, other_doctor, consultation, condition):
        response = client_for(other_doctor).post(
            '/api/v1/diagnostics/',
            {'consultation_id': str(consultation.id), 'report': 'Stable', 'condition_id': str(condition.id)},
            format='json'
        )

        assert response.status_code == 401
        assert not Diagnostic.objects.exists()

    def test_surgery_requires_operation_date(self, client_for, doctor, consultation, condition, surgery):
        response = client_for(doctor).post(
            '/api/v1/diagnostics/',
            {
                'consultation_id': str(consultation.id),
                'report': 'Needs ablation',
                'condition_id': str(condition.id),
                'surgery_id': str(surgery.id),
            },
            format='json'
        )

        assert response.status_code == 400
        assert response.data['error'] == 'Operation date required'

    def test_surgery_with_operation_date(self, client_for, doctor, consultation, condition, surgery, in_days):
        response = client_for(doctor).post(
            '/api/v1/diagnostics/',
            {
                'consultation_id': str(consultation.id),
                'report': 'Needs ablation',
                'condition_id': str(condition.id),
                'surgery_id': str(surgery.id),
                'operation_date': in_days(20).isoformat(),
            },
            format='json'
        )

        assert response.status_code == 200
        assert response.data['surgery_id'] == str(surgery.id)

    def test_unknown_condition(self, client_for, doctor, consultation):
        response = client_for(doctor).post(
            '/api/v1/diagnostics/',
            {'consultation_id': str(consultation.id), 'report': 'x', 'condition_id': str(uuid.uuid4())},
            format='json'
        )

        assert response.status_code == 404

    def test_patient_reads_own_diagnostic(self, client_for, patient, other_patient, diagnostic):
        assert client_for(patient).get(f'/api/v1/diagnostics/{diagnostic.id}/').status_code == 200
        assert client_for(other_patient).get(f'/api/v1/diagnostics/{diagnostic.id}/').status_code == 401


@pytest.mark.django_db
class TestPrescription:
    """/api/v1/prescriptions/"""

    def test_doctor_prescribes(self, client_for, doctor, diagnostic, prescription_payload):
        response = client_for(doctor).post('/api/v1/prescriptions/', prescription_payload, format='json')

        assert response.status_code == 200
        prescription = Prescription.objects.get(id=response.data['id'])
        assert prescription.diagnostic_id == diagnostic.id
        assert prescription.medicine_frequency_unit == 'HOUR'

    def test_other_doctor_gets_401_and_nothing_is_written(self, client_for, other_doctor, prescription_payload):
        response = client_for(other_doctor).post('/api/v1/prescriptions/', prescription_payload, format='json')

        assert response.status_code == 401
        assert not Prescription.objects.exists()

    def test_expiry_in_past(self, client_for, doctor, prescription_payload, in_days):
        prescription_payload['expires_on'] = in_days(-1).isoformat()

        response = client_for(doctor).post('/api/v1/prescriptions/', prescription_payload, format='json')

        assert response.status_code == 400

    @pytest.mark.parametrize('field', ['medicine_amount', 'medicine_frequency'])
    def test_quantities_must_be_positive(self, client_for, doctor, prescription_payload, field):
        prescription_payload[field] = 0

        response = client_for(doctor).post('/api/v1/prescriptions/', prescription_payload, format='json')

        assert response.status_code == 400

    def test_invalid_frequency_unit(self, client_for, doctor, prescription_payload):
        prescription_payload['medicine_frequency_unit'] = 'YEAR'

        response = client_for(doctor).post('/api/v1/prescriptions/', prescription_payload, format='json')

        assert response.status_code == 400
        assert response.data['error'] == 'Invalid medicine frequency unit'

    def test_unknown_medicine_checked_first(self, client_for, doctor, prescription_payload):
        prescription_payload['medicine_id'] = str(uuid.uuid4())
        prescription_payload['medicine_amount'] = 0

        response = client_for(doctor).post('/api/v1/prescriptions/', prescription_payload, format='json')

        assert response.status_code == 404

    def test_update_and_delete(self, client_for, doctor, prescription_payload):
        client = client_for(doctor)
        created = client.post('/api/v1/prescriptions/', prescription_payload, format='json')
        url = f"/api/v1/prescriptions/{created.data['id']}/"

        updated = client.patch(url, {'medicine_amount': 3}, format='json')
        assert updated.status_code == 200
        assert updated.data['medicine_amount'] == 3

        assert client.delete(url).status_code == 204
        assert not Prescription.objects.exists()

    def test_other_doctor_cannot_update_or_delete(self, client_for, other_doctor, diagnostic, medicine, in_days):
        prescription = Prescription.objects.create(
            diagnostic=diagnostic, medicine=medicine, expires_on=in_days(30),
            medicine_amount=2, medicine_frequency=8, medicine_frequency_unit='HOUR',
        )
        client = client_for(other_doctor)
        url = f'/api/v1/prescriptions/{prescription.id}/'

        assert client.patch(url, {'medicine_amount': 5}, format='json').status_code == 401
        assert client.delete(url).status_code == 401

        prescription.refresh_from_db()
        assert prescription.medicine_amount == 2

    def test_list_requires_diagnostic_id(self, client_for, patient):
        response = client_for(patient).get('/api/v1/prescriptions/')

        assert response.status_code == 400

    def test_patient_lists_by_diagnostic(self, client_for, doctor, patient, diagnostic, prescription_payload):
        client_for(doctor).post('/api/v1/prescriptions/', prescription_payload, format='json')

        response = client_for(patient).get('/api/v1/prescriptions/', {'diagnostic_id': str(diagnostic.id)})

        assert response.status_code == 200
        assert response.data['count'] == 1


@pytest.mark.django_db
class TestReferral:
    """/api/v1/referrals/"""

    def test_create_and_update(self, client_for, doctor, consultation, specialty, other_specialty):
        client = client_for(doctor)
        created = client.post(
            '/api/v1/referrals/',
            {'consultation_id': str(consultation.id), 'specialty_id': str(specialty.id)},
            format='json'
        )
        assert created.status_code == 200

        updated = client.patch(
            f"/api/v1/referrals/{created.data['id']}/",
            {'specialty_id': str(other_specialty.id)},
            format='json'
        )

        assert updated.status_code == 200
        assert Referral.objects.get(id=created.data['id']).specialty_id == other_specialty.id

    def test_other_doctor_gets_401(self, client_for, other_doctor, consultation, specialty):
        response = client_for(other_doctor).post(
            '/api/v1/referrals/',
            {'consultation_id': str(consultation.id), 'specialty_id': str(specialty.id)},
            format='json'
        )

        assert response.status_code == 401
        assert not Referral.objects.exists()

    def test_other_doctor_cannot_update(self, client_for, other_doctor, consultation, specialty, other_specialty):
        referral = Referral.objects.create(consultation=consultation, specialty=specialty, date=consultation.datetime)

        response = client_for(other_doctor).patch(
            f'/api/v1/referrals/{referral.id}/', {'specialty_id': str(other_specialty.id)}, format='json'
        )

        assert response.status_code == 401
        referral.refresh_from_db()
        assert referral.specialty_id == specialty.id

    def test_delete_keeps_referral(self, client_for, doctor, consultation, specialty):
        referral = Referral.objects.create(consultation=consultation, specialty=specialty, date=consultation.datetime)

        response = client_for(doctor).delete(f'/api/v1/referrals/{referral.id}/')

        assert response.status_code == 204
        assert Referral.objects.filter(id=referral.id).exists()


@pytest.mark.django_db
class TestExamRequests:
    """PATCH /api/v1/consultation/{id}/exams/"""

    def test_replaces_requested_exams(self, client_for, doctor, consultation, exams):
        client = client_for(doctor)
        url = f'/api/v1/consultation/{consultation.id}/exams/'

        first = client.patch(url, {'exams': [str(exams[0].id), str(exams[1].id)]}, format='json')
        assert first.status_code == 200
        assert len(first.data) == 2

        second = client.patch(url, {'exams': [str(exams[1].id), str(exams[2].id)]}, format='json')

        assert second.status_code == 200
        assert set(ExamRequest.objects.filter(consultation=consultation).values_list('exam_id', flat=True)) == {
            exams[1].id, exams[2].id
        }

    def test_empty_list_clears(self, client_for, doctor, consultation, exams):
        ExamRequest.objects.create(consultation=consultation, exam=exams[0], date=consultation.datetime)

        response = client_for(doctor).patch(
            f'/api/v1/consultation/{consultation.id}/exams/', {'exams': []}, format='json'
        )

        assert response.status_code == 200
        assert not ExamRequest.objects.exists()

    def test_exams_field_required(self, client_for, doctor, consultation):
        response = client_for(doctor).patch(f'/api/v1/consultation/{consultation.id}/exams/', {}, format='json')

        assert response.status_code == 400
        assert response.data['error'] == 'Exams required'

    def test_unknown_exam(self, client_for, doctor, consultation, exams):
        response = client_for(doctor).patch(
            f'/api/v1/consultation/{consultation.id}/exams/',
            {'exams': [str(exams[0].id), str(uuid.uuid4())]},
            format='json'
        )

        assert response.status_code == 404
        assert not ExamRequest.objects.exists()

    def test_other_doctor_gets_401(self, client_for, other_doctor, consultation, exams):
        response = client_for(other_doctor).patch(
            f'/api/v1/consultation/{consultation.id}/exams/',
            {'exams': [str(exams[0].id)]},
            format='json'
        )

        assert response.status_code == 401

    def test_exam_with_results_cannot_be_dropped(self, client_for, doctor, consultation, exams, in_days,
                                                 mock_storage):
        exam_request = ExamRequest.objects.create(consultation=consultation, exam=exams[0], date=consultation.datetime)
        report = make_file()
        ExamResult.objects.create(exam_request=exam_request, short_report='x', date=in_days(11), report=report)

        response = client_for(doctor).patch(
            f'/api/v1/consultation/{consultation.id}/exams/', {'exams': [str(exams[1].id)]}, format='json'
        )

        assert response.status_code == 400
        assert response.data['error'] == 'Exam request has results'
        assert ExamRequest.objects.filter(id=exam_request.id).exists()
        assert ExamResult.objects.count() == 1
        assert File.objects.filter(id=report.id).exists()
        mock_storage['delete'].assert_not_called()
        assert not ExamRequest.objects.filter(exam=exams[1]).exists()

    def test_exam_with_results_can_be_kept(self, client_for, doctor, consultation, exams, in_days):
        exam_request = ExamRequest.objects.create(consultation=consultation, exam=exams[0], date=consultation.datetime)
        ExamResult.objects.create(exam_request=exam_request, short_report='x', date=in_days(11))

        response = client_for(doctor).patch(
            f'/api/v1/consultation/{consultation.id}/exams/',
            {'exams': [str(exams[0].id), str(exams[1].id)]},
            format='json'
        )

        assert response.status_code == 200
        assert ExamResult.objects.filter(exam_request=exam_request).exists()

    def test_missing_consultation(self, client_for, doctor):
        response = client_for(doctor).patch(
            f'/api/v1/consultation/{uuid.uuid4()}/exams/', {'exams': []}, format='json'
        )

        assert response.status_code == 404


@pytest.mark.django_db
class TestExamResults:
    """/api/v1/exam/results/"""

    @pytest.fixture
    def exam_request(self, consultation, exams):
        return ExamRequest.objects.create(consultation=consultation, exam=exams[0], date=consultation.datetime)

    def test_create_with_report(self, client_for, doctor, exam_request, in_days):
        report = make_file()

        response = client_for(doctor).post(
            '/api/v1/exam/results/',
            {
                'exam_request_id': str(exam_request.id),
                'short_report': 'Normal sinus rhythm',
                'date': in_days(11).isoformat(),
                'report_id': str(report.id),
            },
            format='json'
        )

        assert response.status_code == 200
        assert response.data['report_id'] == str(report.id)

    def test_other_doctor_gets_401(self, client_for, other_doctor, exam_request, in_days):
        response = client_for(other_doctor).post(
            '/api/v1/exam/results/',
            {'exam_request_id': str(exam_request.id), 'short_report': 'x', 'date': in_days(11).isoformat()},
            format='json'
        )

        assert response.status_code == 401
        assert not ExamResult.objects.exists()

    def test_replacing_report_deletes_old_file(self, client_for, doctor, exam_request, in_days, mock_storage,
                                               django_capture_on_commit_callbacks):
        old_report = make_file('old.pdf')
        new_report = make_file('new.pdf')
        exam_result = ExamResult.objects.create(
            exam_request=exam_request, short_report='x', date=in_days(11), report=old_report
        )

        with django_capture_on_commit_callbacks(execute=True):
            response = client_for(doctor).patch(
                f'/api/v1/exam/results/{exam_result.id}/',
                {'report_id': str(new_report.id)},
                format='json'
            )

        assert response.status_code == 200
        assert not File.objects.filter(id=old_report.id).exists()
        mock_storage['delete'].assert_called_once_with(old_report.file)

    def test_delete_removes_report(self, client_for, doctor, exam_request, in_days, mock_storage,
                                   django_capture_on_commit_callbacks):
        report = make_file()
        exam_result = ExamResult.objects.create(
            exam_request=exam_request, short_report='x', date=in_days(11), report=report
        )

        with django_capture_on_commit_callbacks(execute=True):
            response = client_for(doctor).delete(f'/api/v1/exam/results/{exam_result.id}/')

        assert response.status_code == 204
        assert not ExamResult.objects.exists()
        assert not File.objects.filter(id=report.id).exists()
        mock_storage['delete'].assert_called_once_with(report.file)

    def test_other_doctor_cannot_update_or_delete(self, client_for, other_doctor, exam_request, in_days, mock_storage):
        report = make_file()
        exam_result = ExamResult.objects.create(
            exam_request=exam_request, short_report='Normal', date=in_days(11), report=report
        )
        client = client_for(other_doctor)
        url = f'/api/v1/exam/results/{exam_result.id}/'

        assert client.patch(url, {'short_report': 'Altered'}, format='json').status_code == 401
        assert client.delete(url).status_code == 401

        exam_result.refresh_from_db()
        assert exam_result.short_report == 'Normal'
        assert File.objects.filter(id=report.id).exists()
        mock_storage['delete'].assert_not_called()
