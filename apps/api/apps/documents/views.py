"""
File upload/download endpoints.

- POST /api/v1/files/ - multipart upload (field ``file``)
- GET /api/v1/files/{id}/ - stream the stored bytes
"""
from django.conf import settings
from django.http import HttpResponse
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.documents import storage
from apps.documents.models import File
from apps.documents.serializers import FileSerializer
from apps.documents.services import create_file


class FileUploadView(APIView):
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        uploaded = request.FILES.get('file')
        if uploaded is None:
            return Response({'error': 'File not provided'}, status=status.HTTP_400_BAD_REQUEST)

        if uploaded.size > settings.FILE_UPLOAD_MAX_BYTES:
            return Response(
                {'error': f'File exceeds {settings.FILE_UPLOAD_MAX_BYTES} bytes'},
                status=status.HTTP_400_BAD_REQUEST
            )

        file = create_file(uploaded)
        return Response(FileSerializer(file).data, status=status.HTTP_201_CREATED)


class FileDownloadView(APIView):

    def get(self, request, pk):
        try:
            file = File.objects.get(pk=pk)
        except File.DoesNotExist:
            return Response({'error': 'File not found'}, status=status.HTTP_404_NOT_FOUND)

        response = HttpResponse(storage.read(file.file), content_type=file.content_type)
        response['Content-Disposition'] = f'inline; filename="{file.name}"'
        return response
