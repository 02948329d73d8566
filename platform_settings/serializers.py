from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .models import SystemSetting


class SystemSettingSerializer(serializers.ModelSerializer):
    value = serializers.SerializerMethodField()
    last_modified_by_name = serializers.SerializerMethodField()

    class Meta:
        model = SystemSetting
        fields = [
            'id', 'setting_key', 'setting_value', 'value', 'setting_type',
            'category', 'description', 'default_value', 'is_active',
            'access_level', 'last_modified_by', 'last_modified_by_name',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'default_value', 'last_modified_by', 'created_at', 'updated_at']

    def get_value(self, obj):
        try:
            value = obj.typed_value
        except ValueError:
            return obj.setting_value
        # Decimal is not JSON native
        if obj.setting_type == 'number':
            return float(value)
        return value

    def get_last_modified_by_name(self, obj):
        user = obj.last_modified_by
        if user is None:
            return None
        return user.get_full_name() or user.email

    def _normalized(self, setting_type, value):
        try:
            return SystemSetting.normalize_value(setting_type, value)
        except DjangoValidationError as e:
            raise serializers.ValidationError({'setting_value': e.messages})

    def validate(self, attrs):
        setting_type = attrs.get('setting_type') or getattr(self.instance, 'setting_type', 'string')
        if 'setting_value' in attrs:
            attrs['setting_value'] = self._normalized(setting_type, attrs['setting_value'])
        elif 'setting_type' in attrs and self.instance is not None:
            attrs['setting_value'] = self._normalized(setting_type, self.instance.setting_value)
        return attrs

    def create(self, validated_data):
        validated_data.setdefault('default_value', validated_data.get('setting_value', ''))
        return super().create(validated_data)


class SystemSettingUpdateSerializer(SystemSettingSerializer):
    """Existing settings keep their key, type and access level."""

    class Meta(SystemSettingSerializer.Meta):
        read_only_fields = SystemSettingSerializer.Meta.read_only_fields + [
            'setting_key', 'setting_type', 'access_level',
        ]
