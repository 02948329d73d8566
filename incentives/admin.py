from django.contrib import admin
from .models import MonthlyIncentive


@admin.register(MonthlyIncentive)
class MonthlyIncentiveAdmin(admin.ModelAdmin):
    list_display = ['user', 'year', 'month', 'incentive_amount', 'adjustment_amount', 'status', 'approved_at']
    list_filter = ['status', 'year', 'month', 'payment_method']
    search_fields = ['user__email', 'user__first_name', 'user__last_name']
    readonly_fields = ['created_at', 'updated_at', 'approved_at']
    raw_id_fields = ['user', 'approved_by', 'created_by']
