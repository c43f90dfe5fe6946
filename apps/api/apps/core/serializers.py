"""
Clinic serializers.
"""
from rest_framework import serializers

from apps.authz.serializers import UserSummarySerializer
from apps.catalog.serializers import SpecialtySerializer
from apps.core.models import Address, Clinic


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = ['street', 'number', 'complement', 'district', 'city', 'state', 'zipcode', 'country']
        extra_kwargs = {'complement': {'required': False}}


class ClinicSerializer(serializers.ModelSerializer):
    """Read representation with owner, address and specialties loaded."""
    owner = UserSummarySerializer(read_only=True)
    address = serializers.SerializerMethodField()
    specialties = SpecialtySerializer(many=True, read_only=True)

    class Meta:
        model = Clinic
        fields = ['id', 'name', 'phone', 'cnpj', 'owner', 'address', 'specialties', 'created_at', 'updated_at']
        read_only_fields = fields

    def get_address(self, obj):
        try:
            return AddressSerializer(obj.address).data
        except Address.DoesNotExist:
            return None


class ClinicWriteSerializer(serializers.ModelSerializer):
    """
    Create/update payload.

    ``address`` is validated with the address rules (400 with per-field
    messages); ``specialties`` replaces the clinic's specialty set.
    """
    address = AddressSerializer(required=False)
    specialties = serializers.ListField(child=serializers.UUIDField(), required=False)

    class Meta:
        model = Clinic
        fields = ['name', 'phone', 'cnpj', 'address', 'specialties']
