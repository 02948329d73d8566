from django.contrib import admin
from .models import Sale


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['sale_number', 'product', 'sales_person', 'client_name', 'quantity',
                    'actual_selling_price', 'status', 'sale_date']
    list_filter = ['status', 'sale_date', 'product__category']
    search_fields = ['sale_number', 'client_name', 'sales_person__email']
    readonly_fields = ['sale_number', 'created_at', 'updated_at', 'reviewed_at']
    raw_id_fields = ['product', 'sales_person', 'campaign', 'reviewed_by']
