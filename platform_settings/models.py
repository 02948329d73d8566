import json
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import models
from django.contrib.auth import get_user_model

User = get_user_model()


class SystemSetting(models.Model):
    """
    Key/value platform setting.

    access_level decides who may see and edit it: super admins see every
    setting, agency admins only 'agency_admin' and 'staff' level ones.
    """

    TYPE_CHOICES = [
        ('boolean', 'Boolean'),
        ('string', 'String'),
        ('number', 'Number'),
        ('json', 'JSON'),
    ]

    ACCESS_LEVEL_CHOICES = [
        ('super_admin', '슈퍼 어드민'),
        ('agency_admin', '대행사 어드민'),
        ('staff', '직원'),
    ]

    DEFAULTS = [
        {
            'setting_key': 'incentive_visibility_staff',
            'setting_value': 'true',
            'setting_type': 'boolean',
            'category': 'incentive',
            'description': '직원이 자신의 인센티브 금액을 볼 수 있는지 여부',
            'access_level': 'super_admin',
        },
        {
            'setting_key': 'incentive_visibility_agency_admin',
            'setting_value': 'true',
            'setting_type': 'boolean',
            'category': 'incentive',
            'description': '대행사 어드민이 직원들의 인센티브를 볼 수 있는지 여부',
            'access_level': 'super_admin',
        },
        {
            'setting_key': 'auto_margin_calculation',
            'setting_value': 'false',
            'setting_type': 'boolean',
            'category': 'sales',
            'description': '자동 마진 계산 활성화 여부',
            'access_level': 'agency_admin',
        },
        {
            'setting_key': 'default_margin_rate',
            'setting_value': '15',
            'setting_type': 'number',
            'category': 'sales',
            'description': '기본 마진율 (%)',
            'access_level': 'agency_admin',
        },
        {
            'setting_key': 'document_auto_generation',
            'setting_value': 'true',
            'setting_type': 'boolean',
            'category': 'document',
            'description': '승인 시 자동 문서 생성 여부',
            'access_level': 'agency_admin',
        },
    ]

    setting_key = models.CharField(max_length=100, unique=True)
    setting_value = models.TextField()
    setting_type = models.CharField(max_length=10, choices=TYPE_CHOICES, default='string')
    category = models.CharField(max_length=50, default='general', db_index=True)
    description = models.TextField(blank=True)
    default_value = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    access_level = models.CharField(
        max_length=20,
        choices=ACCESS_LEVEL_CHOICES,
        default='super_admin',
        db_index=True
    )
    last_modified_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='modified_settings'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['category', 'setting_key']

    def __str__(self):
        return self.setting_key

    @staticmethod
    def normalize_value(setting_type, value):
        """
        Validate a raw value against a setting type and return its stored text.

        Raises:
            ValidationError: value does not fit the type
        """
        if setting_type == 'boolean':
            text = str(value).lower()
            if text not in ('true', 'false'):
                raise ValidationError('Value must be a boolean (true/false).')
            return text
        if setting_type == 'number':
            try:
                number = Decimal(str(value))
            except (InvalidOperation, ValueError):
                raise ValidationError('Value must be a number.')
            if not number.is_finite():
                raise ValidationError('Value must be a number.')
            return format(number.normalize(), 'f')
        if setting_type == 'json':
            if not isinstance(value, str):
                return json.dumps(value)
            try:
                json.loads(value)
            except ValueError:
                raise ValidationError('Value must be valid JSON.')
            return value
        return str(value)

    @property
    def typed_value(self):
        if self.setting_type == 'boolean':
            return self.setting_value.lower() == 'true'
        if self.setting_type == 'number':
            return Decimal(self.setting_value)
        if self.setting_type == 'json':
            return json.loads(self.setting_value)
        return self.setting_value

    @classmethod
    def seed_defaults(cls):
        """Create the default settings that are missing. Returns the number created."""
        created_count = 0
        for default in cls.DEFAULTS:
            values = dict(default)
            key = values.pop('setting_key')
            values['default_value'] = values['setting_value']
            _, created = cls.objects.get_or_create(setting_key=key, defaults=values)
            created_count += int(created)
        return created_count

    @classmethod
    def get_bool(cls, key, default=True):
        setting = cls.objects.filter(setting_key=key, is_active=True).first()
        if setting is None:
            return default
        return setting.setting_value.lower() == 'true'
