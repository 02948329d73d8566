from django.contrib import admin
from .models import Campaign, Post


class PostInline(admin.TabularInline):
    model = Post
    extra = 0
    fields = ['title', 'work_type', 'topic_status', 'outline_status', 'product', 'quantity', 'published_url']
    show_change_link = True


@admin.register(Campaign)
class CampaignAdmin(admin.ModelAdmin):
    list_display = [
        'name',
        'client_name',
        'manager',
        'client',
        'budget',
        'execution_status',
        'invoice_issued',
        'payment_completed',
        'created_at',
    ]
    list_filter = ['execution_status', 'invoice_issued', 'payment_completed', 'created_at']
    search_fields = ['name', 'client_name', 'manager__email', 'client__email']
    readonly_fields = ['created_at', 'updated_at', 'execution_approved_at', 'execution_completed_at']
    raw_id_fields = ['manager', 'client', 'created_by']
    inlines = [PostInline]

    fieldsets = (
        ('Campaign', {
            'fields': ('name', 'client_name', 'manager', 'client', 'budget', 'memo', 'notes', 'reminders')
        }),
        ('Billing', {
            'fields': ('invoice_issued', 'invoice_date', 'invoice_due_date',
                       'payment_completed', 'payment_date', 'payment_due_date')
        }),
        ('Execution', {
            'fields': ('execution_status', 'execution_approved_at', 'execution_completed_at')
        }),
        ('Chat', {
            'fields': ('chat_content', 'chat_summary', 'chat_attachments'),
            'classes': ('collapse',)
        }),
        ('Metadata', {
            'fields': ('created_by', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ['title', 'campaign', 'work_type', 'topic_status', 'outline_status', 'created_at']
    list_filter = ['work_type', 'topic_status', 'outline_status']
    search_fields = ['title', 'campaign__name']
    raw_id_fields = ['campaign', 'product']
