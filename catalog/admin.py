from django.contrib import admin
from .models import Product, WorkType


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'sku', 'category', 'cost_price', 'selling_price', 'company', 'is_active']
    list_filter = ['category', 'is_active', 'unit']
    search_fields = ['name', 'sku', 'description', 'company']
    readonly_fields = ['created_at', 'updated_at', 'created_by']

    fieldsets = (
        ('Product', {
            'fields': ('name', 'sku', 'category', 'description', 'tags')
        }),
        ('Pricing', {
            'fields': ('cost_price', 'selling_price', 'unit', 'incentive_rate', 'min_quantity', 'max_quantity')
        }),
        ('Ownership', {
            'fields': ('company', 'is_active')
        }),
        ('Metadata', {
            'fields': ('created_by', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def save_model(self, request, obj, form, change):
        if not change:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)


@admin.register(WorkType)
class WorkTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'company', 'sort_order', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name']
