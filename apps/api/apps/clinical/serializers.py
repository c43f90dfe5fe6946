"""
Clinical serializers: diagnostics, prescriptions, referrals, exams.

Write serializers only check structure; business rules (ownership,
existence, dates, units) are applied by apps.clinical.services so the
error answers keep their per-rule status codes.
"""
from rest_framework import serializers

from apps.catalog.serializers import ExamSerializer
from apps.clinical.models import (
    Diagnostic,
    ExamRequest,
    ExamResult,
    Prescription,
    Referral,
)


class DiagnosticSerializer(serializers.ModelSerializer):
    consultation_id = serializers.UUIDField(read_only=True)
    condition_id = serializers.UUIDField(read_only=True)
    surgery_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Diagnostic
        fields = ['id', 'consultation_id', 'report', 'condition_id', 'surgery_id', 'operation_date', 'created_at']
        read_only_fields = fields


class DiagnosticWriteSerializer(serializers.Serializer):
    consultation_id = serializers.UUIDField()
    report = serializers.CharField()
    condition_id = serializers.UUIDField()
    surgery_id = serializers.UUIDField(required=False, allow_null=True)
    operation_date = serializers.DateTimeField(required=False, allow_null=True)


class PrescriptionSerializer(serializers.ModelSerializer):
    diagnostic_id = serializers.UUIDField(read_only=True)
    medicine_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Prescription
        fields = [
            'id',
            'diagnostic_id',
            'medicine_id',
            'issued_on',
            'expires_on',
            'medicine_amount',
            'medicine_frequency',
            'medicine_frequency_unit',
        ]
        read_only_fields = fields


class PrescriptionWriteSerializer(serializers.Serializer):
    """
    Create payload. Updates use it with partial=True; diagnostic_id is
    ignored on update.
    """
    diagnostic_id = serializers.UUIDField()
    medicine_id = serializers.UUIDField()
    expires_on = serializers.DateTimeField()
    medicine_amount = serializers.IntegerField()
    medicine_frequency = serializers.IntegerField()
    medicine_frequency_unit = serializers.CharField()


class ReferralSerializer(serializers.ModelSerializer):
    consultation_id = serializers.UUIDField(read_only=True)
    specialty_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Referral
        fields = ['id', 'consultation_id', 'specialty_id', 'date']
        read_only_fields = fields


class ReferralWriteSerializer(serializers.Serializer):
    consultation_id = serializers.UUIDField()
    specialty_id = serializers.UUIDField()


class ExamRequestSerializer(serializers.ModelSerializer):
    exam = ExamSerializer(read_only=True)
    consultation_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = ExamRequest
        fields = ['id', 'consultation_id', 'exam', 'date']
        read_only_fields = fields


class ExamResultSerializer(serializers.ModelSerializer):
    exam_request_id = serializers.UUIDField(read_only=True)
    report_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = ExamResult
        fields = ['id', 'exam_request_id', 'short_report', 'date', 'report_id', 'created_at', 'updated_at']
        read_only_fields = fields


class ExamResultWriteSerializer(serializers.Serializer):
    exam_request_id = serializers.UUIDField()
    short_report = serializers.CharField()
    date = serializers.DateTimeField()
    report_id = serializers.UUIDField(required=False, allow_null=True)
