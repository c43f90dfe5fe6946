from rest_framework import serializers

from apps.documents.models import File


class FileSerializer(serializers.ModelSerializer):
    class Meta:
        model = File
        fields = ['id', 'file', 'name', 'type', 'subtype', 'size_bytes', 'created_at']
        read_only_fields = fields
