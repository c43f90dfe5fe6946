"""
Tests for file upload and download (MinIO patched out).
"""
import uuid

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from apps.documents.models import File


@pytest.mark.django_db
class TestFiles:
    """/api/v1/files/"""

    def test_upload_stores_bytes_and_row(self, client_for, doctor, mock_storage):
        upload = SimpleUploadedFile('ecg report.pdf', b'%PDF-1.4 data', content_type='application/pdf')

        response = client_for(doctor).post('/api/v1/files/', {'file': upload}, format='multipart')

        assert response.status_code == 201
        file = File.objects.get(id=response.data['id'])
        assert (file.type, file.subtype) == ('application', 'pdf')
        assert file.name == 'ecg report.pdf'
        assert file.file.startswith('files/')
        assert file.file.endswith('_ecgreport.pdf')
        mock_storage['store'].assert_called_once_with(b'%PDF-1.4 data', file.file, 'application/pdf')

    def test_missing_file_field(self, client_for, doctor, mock_storage):
        response = client_for(doctor).post('/api/v1/files/', {}, format='multipart')

        assert response.status_code == 400
        mock_storage['store'].assert_not_called()

    def test_size_limit(self, client_for, doctor, mock_storage, settings):
        settings.FILE_UPLOAD_MAX_BYTES = 4
        upload = SimpleUploadedFile('big.txt', b'too large', content_type='text/plain')

        response = client_for(doctor).post('/api/v1/files/', {'file': upload}, format='multipart')

        assert response.status_code == 400
        assert not File.objects.exists()

    def test_download_streams_bytes(self, client_for, patient, mock_storage):
        file = File.objects.create(file='files/abc_leaflet.pdf', name='leaflet.pdf', type='application',
                                   subtype='pdf')
        mock_storage['read'].return_value = b'leaflet bytes'

        response = client_for(patient).get(f'/api/v1/files/{file.id}/')

        assert response.status_code == 200
        assert response.content == b'leaflet bytes'
        assert response['Content-Type'] == 'application/pdf'
        mock_storage['read'].assert_called_once_with('files/abc_leaflet.pdf')

    def test_download_missing(self, client_for, patient, mock_storage):
        response = client_for(patient).get(f'/api/v1/files/{uuid.uuid4()}/')

        assert response.status_code == 404

    def test_anonymous_upload_rejected(self, api_client, mock_storage):
        upload = SimpleUploadedFile('a.txt', b'a', content_type='text/plain')

        response = api_client.post('/api/v1/files/', {'file': upload}, format='multipart')

        assert response.status_code == 401
