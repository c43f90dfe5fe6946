"""
Tests for accounts, sessions, password reset and roles.
"""
from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from apps.authz.models import Permission, Role, RoleChoices, User, UserPermission
from apps.authz.roles import has_permission, has_role, user_role_slugs
from apps.authz.services import assign_roles, reset_password
from apps.core.exceptions import NotFoundError, UnauthorizedError


@pytest.fixture
def registration_payload():
    return {
        'email': 'new.patient@test.com',
        'username': 'new.patient',
        'password': 'secret123',
        'password_confirmation': 'secret123',
        'first_name': 'New',
        'last_name': 'Patient',
        'phone': '+55 11 90000-0000',
    }


@pytest.mark.django_db
class TestRegistration:
    """POST /api/v1/users/"""

    def test_sign_up_gets_patient_role(self, api_client, registration_payload):
        response = api_client.post('/api/v1/users/', registration_payload, format='json')

        assert response.status_code == 201
        assert response.data['roles'] == [RoleChoices.PATIENT]
        user = User.objects.get(email='new.patient@test.com')
        assert user.check_password('secret123')

    def test_password_confirmation_must_match(self, api_client, registration_payload):
        registration_payload['password_confirmation'] = 'other'

        response = api_client.post('/api/v1/users/', registration_payload, format='json')

        assert response.status_code == 400
        assert 'password_confirmation' in response.data

    def test_duplicate_email(self, api_client, patient, registration_payload):
        registration_payload['email'] = patient.email

        response = api_client.post('/api/v1/users/', registration_payload, format='json')

        assert response.status_code == 400

    def test_token_login(self, api_client, patient):
        response = api_client.post(
            '/api/auth/token/',
            {'email': patient.email, 'password': 'test123'},
            format='json'
        )

        assert response.status_code == 200
        assert 'access' in response.data


@pytest.mark.django_db
class TestUsers:
    """/api/v1/users/{id}/"""

    def test_list_is_administrator_only(self, client_for, administrator, patient):
        assert client_for(patient).get('/api/v1/users/').status_code == 403
        assert client_for(administrator).get('/api/v1/users/').status_code == 200

    def test_user_reads_self(self, client_for, patient):
        response = client_for(patient).get(f'/api/v1/users/{patient.id}/')

        assert response.status_code == 200
        assert response.data['email'] == patient.email

    def test_other_user_is_forbidden(self, client_for, patient, other_patient):
        response = client_for(patient).get(f'/api/v1/users/{other_patient.id}/')

        assert response.status_code == 403

    def test_administrator_updates_any_user(self, client_for, administrator, patient):
        response = client_for(administrator).patch(
            f'/api/v1/users/{patient.id}/', {'phone': '+55 11 91111-1111'}, format='json'
        )

        assert response.status_code == 200
        patient.refresh_from_db()
        assert patient.phone == '+55 11 91111-1111'

    def test_missing_user(self, client_for, administrator):
        response = client_for(administrator).get('/api/v1/users/00000000-0000-0000-0000-000000000000/')

        assert response.status_code == 404


@pytest.mark.django_db
class TestForgotPassword:
    """/api/v1/users/forgot/"""

    def test_request_stores_token_and_mails_it(self, api_client, patient, mailoutbox,
                                               django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            response = api_client.post('/api/v1/users/forgot/', {'email': patient.email}, format='json')

        assert response.status_code == 204
        patient.refresh_from_db()
        assert patient.token
        assert len(mailoutbox) == 1
        assert patient.token in mailoutbox[0].body

    def test_unknown_email(self, api_client):
        response = api_client.post('/api/v1/users/forgot/', {'email': 'nobody@test.com'}, format='json')

        assert response.status_code == 404

    def test_reset_with_fresh_token(self, api_client, patient):
        patient.token = 'abc123'
        patient.token_created_at = timezone.now()
        patient.save()

        response = api_client.patch(
            '/api/v1/users/forgot/', {'token': 'abc123', 'password': 'brand-new'}, format='json'
        )

        assert response.status_code == 204
        patient.refresh_from_db()
        assert patient.check_password('brand-new')
        assert patient.token is None

    def test_expired_token(self, api_client, patient):
        patient.token = 'abc123'
        patient.token_created_at = timezone.now() - timedelta(days=3)
        patient.save()

        response = api_client.patch(
            '/api/v1/users/forgot/', {'token': 'abc123', 'password': 'brand-new'}, format='json'
        )

        assert response.status_code == 401

    def test_token_valid_through_whole_days(self, patient):
        created = timezone.now()
        patient.token = 'abc123'
        patient.token_created_at = created
        patient.save()

        reset_password('abc123', 'brand-new', now=created + timedelta(days=2, hours=23))

        patient.refresh_from_db()
        assert patient.check_password('brand-new')

    def test_token_expires_after_ttl(self, patient):
        created = timezone.now()
        patient.token = 'abc123'
        patient.token_created_at = created
        patient.save()

        with pytest.raises(UnauthorizedError):
            reset_password('abc123', 'brand-new', now=created + timedelta(days=3))

    def test_unknown_token(self, api_client):
        response = api_client.patch(
            '/api/v1/users/forgot/', {'token': 'nope', 'password': 'brand-new'}, format='json'
        )

        assert response.status_code == 404


@pytest.mark.django_db
class TestRoles:
    """Roles are read from the database on every check."""

    def test_role_change_applies_to_next_request(self, client_for, administrator, patient):
        Role.objects.create(slug=RoleChoices.DOCTOR, name='Doctor')
        client = client_for(patient)
        assert client.get('/api/v1/timetables/').status_code == 403

        response = client_for(administrator).post(
            f'/api/v1/users/{patient.id}/roles/', {'roles': [RoleChoices.DOCTOR]}, format='json'
        )

        assert response.status_code == 200
        assert response.data['roles'] == [RoleChoices.DOCTOR]
        assert client.get('/api/v1/timetables/').status_code == 200

    def test_has_role_reads_current_rows(self, patient):
        assert has_role(patient, RoleChoices.PATIENT)

        Role.objects.get_or_create(slug=RoleChoices.ASSISTANT, defaults={'name': 'Assistant'})
        assign_roles(patient, [RoleChoices.ASSISTANT])

        assert not has_role(patient, RoleChoices.PATIENT)
        assert user_role_slugs(patient) == {RoleChoices.ASSISTANT}

    def test_unknown_role_slug(self, patient):
        with pytest.raises(NotFoundError):
            assign_roles(patient, [RoleChoices.DOCTOR])

    def test_permission_through_role_or_grant(self, patient, other_patient):
        permission = Permission.objects.create(slug='consultations.cancel', name='Cancel consultations')
        Role.objects.get(slug=RoleChoices.PATIENT).permissions.add(permission)

        assert has_permission(patient, 'consultations.cancel')
        assert has_permission(other_patient, 'consultations.cancel')
        assert not has_permission(patient, 'consultations.reassign')

        reassign = Permission.objects.create(slug='consultations.reassign', name='Reassign consultations')
        UserPermission.objects.create(user=patient, permission=reassign)

        assert has_permission(patient, 'consultations.reassign')
        assert not has_permission(other_patient, 'consultations.reassign')

    def test_administrator_creates_role_with_permissions(self, client_for, administrator):
        Permission.objects.create(slug='timetables.manage', name='Manage timetables')

        response = client_for(administrator).post(
            '/api/v1/roles/',
            {'slug': RoleChoices.DOCTOR, 'name': 'Doctor', 'permissions': ['timetables.manage']},
            format='json'
        )

        assert response.status_code == 201
        assert response.data['permission_slugs'] == ['timetables.manage']

    def test_duplicate_role(self, client_for, administrator):
        response = client_for(administrator).post(
            '/api/v1/roles/', {'slug': RoleChoices.ADMINISTRATOR, 'name': 'Admin'}, format='json'
        )

        assert response.status_code == 400

    def test_anonymous_is_rejected(self, api_client):
        assert api_client.get('/api/v1/consultations/').status_code == 401


@pytest.mark.django_db
class TestSeedRoles:

    def test_creates_fixed_roles_once(self):
        call_command('seed_roles', stdout=StringIO())
        call_command('seed_roles', stdout=StringIO())

        assert sorted(Role.objects.values_list('slug', flat=True)) == sorted(RoleChoices.values)
