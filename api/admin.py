from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from .models import UserProfile, CompanyLogo

User = get_user_model()


class UserProfileInline(admin.StackedInline):
    """Inline admin for UserProfile within User admin."""
    model = UserProfile
    can_delete = False
    verbose_name = 'Profile'
    verbose_name_plural = 'Profile'
    fields = ['role', 'company', 'contact', 'incentive_rate']


class UserAdmin(DjangoUserAdmin):
    """User admin with role and company columns."""
    list_display = ['email', 'first_name', 'last_name', 'get_role', 'get_company', 'is_active', 'date_joined']
    list_filter = ['is_active', 'profile__role']
    search_fields = ['email', 'first_name', 'last_name', 'profile__company']
    inlines = [UserProfileInline]
    ordering = ['-date_joined']

    def get_role(self, obj):
        return obj.profile.get_role_display() if hasattr(obj, 'profile') else 'No Profile'
    get_role.short_description = 'Role'
    get_role.admin_order_field = 'profile__role'

    def get_company(self, obj):
        if hasattr(obj, 'profile') and obj.profile.company:
            return obj.profile.company
        return 'None'
    get_company.short_description = 'Company'
    get_company.admin_order_field = 'profile__company'


# Unregister the default User admin and register our enhanced version
admin.site.unregister(User)
admin.site.register(User, UserAdmin)


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    """Admin interface for UserProfile."""
    list_display = ['user', 'role', 'company', 'incentive_rate', 'created_at']
    list_filter = ['role', 'company']
    search_fields = ['user__email', 'user__first_name', 'user__last_name', 'company']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']

    fieldsets = (
        ('User', {
            'fields': ('user',)
        }),
        ('Role & Company', {
            'fields': ('role', 'company')
        }),
        ('Profile', {
            'fields': ('contact', 'incentive_rate')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(CompanyLogo)
class CompanyLogoAdmin(admin.ModelAdmin):
    list_display = ['company', 'uploaded_by', 'updated_at']
    search_fields = ['company']
    readonly_fields = ['created_at', 'updated_at']
