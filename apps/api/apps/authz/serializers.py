"""
Authz serializers: users, password reset, roles and permissions.
"""
from rest_framework import serializers

from apps.authz.models import User, Role, Permission, RoleChoices


class UserSerializer(serializers.ModelSerializer):
    """Read representation of a user with role slugs."""
    full_name = serializers.CharField(read_only=True)
    roles = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'username',
            'first_name',
            'last_name',
            'full_name',
            'birthdate',
            'phone',
            'clinic_id',
            'specialty_id',
            'avatar_id',
            'roles',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_roles(self, obj):
        return sorted(obj.user_roles.values_list('role__slug', flat=True))


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user used inside consultations, slots and clinics."""
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'full_name', 'specialty_id', 'avatar_id']
        read_only_fields = fields


class UserRegistrationSerializer(serializers.ModelSerializer):
    """
    Public sign-up.

    password and password_confirmation must match; email and username
    are unique.
    """
    password = serializers.CharField(write_only=True, min_length=6)
    password_confirmation = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'username',
            'password',
            'password_confirmation',
            'first_name',
            'last_name',
            'birthdate',
            'phone',
        ]
        read_only_fields = ['id']
        extra_kwargs = {
            'first_name': {'required': True, 'allow_blank': False},
            'last_name': {'required': True, 'allow_blank': False},
            'phone': {'required': True, 'allow_blank': False},
        }

    def validate(self, attrs):
        if attrs['password'] != attrs.pop('password_confirmation'):
            raise serializers.ValidationError(
                {'password_confirmation': ['Password confirmation does not match']}
            )
        return attrs


class UserUpdateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False, min_length=6)

    class Meta:
        model = User
        fields = ['username', 'email', 'password', 'first_name', 'last_name', 'birthdate', 'phone']

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for field, value in validated_data.items():
            setattr(instance, field, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance


class ForgotPasswordRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ForgotPasswordResetSerializer(serializers.Serializer):
    token = serializers.CharField()
    password = serializers.CharField(min_length=6)


class PermissionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Permission
        fields = ['id', 'slug', 'name', 'description', 'created_at']
        read_only_fields = ['id', 'created_at']


class RoleSerializer(serializers.ModelSerializer):
    """Role with its permission slugs; writing ``permissions`` replaces the set."""
    slug = serializers.ChoiceField(choices=RoleChoices.choices)
    permissions = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
        write_only=True
    )
    permission_slugs = serializers.SerializerMethodField()

    class Meta:
        model = Role
        fields = ['id', 'slug', 'name', 'description', 'permissions', 'permission_slugs', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate_slug(self, value):
        existing = Role.objects.filter(slug=value)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError('Role already exists')
        return value

    def get_permission_slugs(self, obj):
        return sorted(obj.permissions.values_list('slug', flat=True))


class RoleAssignmentSerializer(serializers.Serializer):
    roles = serializers.ListField(child=serializers.ChoiceField(choices=RoleChoices.choices))
    permissions = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
