from django.contrib import admin
from .models import PurchaseRequest


@admin.register(PurchaseRequest)
class PurchaseRequestAdmin(admin.ModelAdmin):
    list_display = ['title', 'requester', 'amount', 'resource_type', 'priority', 'status', 'requested_date']
    list_filter = ['status', 'resource_type', 'priority']
    search_fields = ['title', 'description', 'requester__email']
    readonly_fields = ['created_at', 'updated_at']
    raw_id_fields = ['requester', 'approver', 'campaign', 'post', 'sale']
