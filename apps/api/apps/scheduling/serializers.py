"""
Scheduling serializers: timetable slots, consultations and schedules.
"""
from rest_framework import serializers

from apps.authz.serializers import UserSummarySerializer
from apps.core.models import Address
from apps.core.serializers import AddressSerializer
from apps.scheduling.models import Consultation, TimetableSlot


class TimetableSlotSerializer(serializers.ModelSerializer):
    doctor = UserSummarySerializer(read_only=True)
    clinic_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = TimetableSlot
        fields = ['id', 'datetime', 'scheduled', 'doctor', 'clinic_id', 'created_at', 'updated_at']
        read_only_fields = fields


class TimetableSlotWriteSerializer(serializers.Serializer):
    """Create payload; ``doctor_id`` is required when an administrator creates the slot."""
    datetime = serializers.DateTimeField()
    clinic_id = serializers.UUIDField()
    doctor_id = serializers.UUIDField(required=False, allow_null=True)


class TimetableSlotUpdateSerializer(serializers.Serializer):
    datetime = serializers.DateTimeField(required=False)
    clinic_id = serializers.UUIDField(required=False)
    doctor_id = serializers.UUIDField(required=False, allow_null=True)


class ConsultationSerializer(serializers.ModelSerializer):
    """Consultation with doctor and patient summaries."""
    doctor = UserSummarySerializer(read_only=True)
    patient = UserSummarySerializer(read_only=True)
    clinic_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Consultation
        fields = [
            'id',
            'datetime',
            'is_return',
            'confirmed',
            'clinic_id',
            'doctor',
            'patient',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ConsultationBookingSerializer(serializers.Serializer):
    clinic_id = serializers.UUIDField()
    doctor_id = serializers.UUIDField()
    patient_id = serializers.UUIDField(required=False, allow_null=True)
    datetime = serializers.DateTimeField()
    is_return = serializers.BooleanField()


class ConsultationReassignSerializer(serializers.Serializer):
    clinic_id = serializers.UUIDField(required=False)
    doctor_id = serializers.UUIDField(required=False)
    datetime = serializers.DateTimeField(required=False)
    is_return = serializers.BooleanField(required=False)


class FreeSlotSerializer(serializers.ModelSerializer):
    doctor = UserSummarySerializer(read_only=True)

    class Meta:
        model = TimetableSlot
        fields = ['id', 'datetime', 'doctor']
        read_only_fields = fields


def serialize_schedule(clinic, slots):
    """Clinic header plus its free slots, the shape of GET /schedules/."""
    try:
        address = AddressSerializer(clinic.address).data
    except Address.DoesNotExist:
        address = None
    return {
        'clinic': {'id': str(clinic.id), 'name': clinic.name, 'address': address},
        'timetables': FreeSlotSerializer(slots, many=True).data,
    }
