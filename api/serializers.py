from decimal import Decimal

from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.db import transaction

from .models import UserProfile, CompanyLogo

User = get_user_model()

PROFILE_FIELDS = ('role', 'company', 'contact', 'incentive_rate')


class UserSerializer(serializers.ModelSerializer):
    """Serializer for User model with profile information."""

    full_name = serializers.SerializerMethodField(read_only=True)
    role = serializers.CharField(source='profile.role', read_only=True)
    role_display = serializers.CharField(source='profile.get_role_display', read_only=True)
    company = serializers.CharField(source='profile.company', read_only=True, allow_null=True)
    contact = serializers.CharField(source='profile.contact', read_only=True)
    incentive_rate = serializers.DecimalField(
        source='profile.incentive_rate', max_digits=5, decimal_places=2, read_only=True
    )

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'first_name',
            'last_name',
            'full_name',
            'is_active',
            'date_joined',
            'role',
            'role_display',
            'company',
            'contact',
            'incentive_rate',
        ]
        read_only_fields = fields

    def get_full_name(self, obj):
        """Return full name or email as fallback"""
        return obj.get_full_name() or obj.email


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user representation for nested fields (manager, client, requester, ...)."""
    full_name = serializers.SerializerMethodField()
    role = serializers.CharField(source='profile.role', read_only=True, default=None)
    company = serializers.CharField(source='profile.company', read_only=True, default=None)

    class Meta:
        model = User
        fields = ['id', 'email', 'full_name', 'role', 'company']
        read_only_fields = fields

    def get_full_name(self, obj):
        return obj.get_full_name() or obj.email


class UserWriteSerializer(serializers.ModelSerializer):
    """
    Create/update users together with their profile.

    Profile attributes are plain fields here; create() and update() route
    them onto the profile row.
    """

    password = serializers.CharField(write_only=True, required=False, min_length=8)
    role = serializers.ChoiceField(choices=UserProfile.ROLE_CHOICES, required=False)
    company = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    contact = serializers.CharField(max_length=50, required=False, allow_blank=True)
    incentive_rate = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        required=False,
        min_value=Decimal('0'),
        max_value=Decimal('100'),
    )

    class Meta:
        model = User
        fields = [
            'email',
            'password',
            'first_name',
            'last_name',
            'is_active',
            'role',
            'company',
            'contact',
            'incentive_rate',
        ]
        extra_kwargs = {
            'email': {'required': True},
        }

    def validate_email(self, value):
        queryset = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value

    def validate(self, data):
        if self.instance is None and not data.get('password'):
            raise serializers.ValidationError({'password': 'Password is required.'})
        return data

    def _pop_profile(self, validated_data):
        return {key: validated_data.pop(key) for key in PROFILE_FIELDS if key in validated_data}

    @transaction.atomic
    def create(self, validated_data):
        profile_data = self._pop_profile(validated_data)
        password = validated_data.pop('password')
        user = User.objects.create_user(
            username=validated_data['email'],
            password=password,
            **validated_data
        )
        profile = user.profile
        for attr, value in profile_data.items():
            setattr(profile, attr, value)
        profile.save()
        return user

    @transaction.atomic
    def update(self, instance, validated_data):
        profile_data = self._pop_profile(validated_data)
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if 'email' in validated_data:
            instance.username = validated_data['email']
        if password:
            instance.set_password(password)
        instance.save()

        profile = instance.profile
        for attr, value in profile_data.items():
            setattr(profile, attr, value)
        profile.save()
        return instance


class CurrentUserUpdateSerializer(serializers.ModelSerializer):
    """Serializer for updating the current user (by the user themselves)."""

    contact = serializers.CharField(source='profile.contact', required=False, allow_blank=True)

    class Meta:
        model = User
        fields = ['first_name', 'last_name', 'contact']

    def update(self, instance, validated_data):
        profile_data = validated_data.pop('profile', {})
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()

        if 'contact' in profile_data:
            instance.profile.contact = profile_data['contact']
            instance.profile.save()
        return instance


class CompanyLogoSerializer(serializers.ModelSerializer):
    """Serializer for CompanyLogo model."""

    logo_data = serializers.CharField(write_only=True, required=False)
    uploaded_by_email = serializers.EmailField(source='uploaded_by.email', read_only=True)

    class Meta:
        model = CompanyLogo
        fields = [
            'id',
            'company',
            'logo_url',
            'logo_data',
            'uploaded_by',
            'uploaded_by_email',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'company', 'uploaded_by', 'created_at', 'updated_at']
        extra_kwargs = {
            'logo_url': {'required': False},
        }

    def validate(self, data):
        logo = data.pop('logo_data', None)
        if not data.get('logo_url'):
            if not logo:
                raise serializers.ValidationError("Either logo_url or logo_data is required.")
            data['logo_url'] = logo
        return data
