from rest_framework import serializers

from apps.catalog.models import Condition, Exam, Medicine, Specialty, Surgery


class SpecialtySerializer(serializers.ModelSerializer):
    class Meta:
        model = Specialty
        fields = ['id', 'name', 'description', 'created_at']
        read_only_fields = ['id', 'created_at']


class MedicineSerializer(serializers.ModelSerializer):
    class Meta:
        model = Medicine
        fields = ['id', 'name', 'active_ingredient', 'contra_indications', 'leaflet', 'created_at']
        read_only_fields = ['id', 'created_at']


class ExamSerializer(serializers.ModelSerializer):
    class Meta:
        model = Exam
        fields = ['id', 'name', 'description', 'created_at']
        read_only_fields = ['id', 'created_at']


class ConditionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Condition
        fields = ['id', 'name', 'description', 'specialty', 'created_at']
        read_only_fields = ['id', 'created_at']


class SurgerySerializer(serializers.ModelSerializer):
    class Meta:
        model = Surgery
        fields = ['id', 'name', 'description', 'specialty', 'created_at']
        read_only_fields = ['id', 'created_at']
