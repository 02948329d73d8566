from django.contrib import admin
from .models import SystemSetting


@admin.register(SystemSetting)
class SystemSettingAdmin(admin.ModelAdmin):
    list_display = ['setting_key', 'setting_value', 'setting_type', 'category', 'access_level', 'is_active']
    list_filter = ['category', 'access_level', 'setting_type', 'is_active']
    search_fields = ['setting_key', 'description']
    readonly_fields = ['created_at', 'updated_at', 'last_modified_by']

    def save_model(self, request, obj, form, change):
        obj.last_modified_by = request.user
        super().save_model(request, obj, form, change)
