"""
URL configuration for config project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include
from api import views as api_views

urlpatterns = [
    path('admin/', admin.site.urls),
    path('accounts/', include('allauth.urls')),

    path('api/auth/status/', api_views.auth_status, name='auth_status'),
    path('api/health/', api_views.health_check, name='health_check'),

    # Users and company logo
    path('api/v1/', include('api.urls')),

    # Product catalog and work types
    path('api/v1/', include('catalog.urls')),

    # Campaigns and tasks
    path('api/v1/', include('campaigns.urls')),

    # Sales, purchase requests and incentives
    path('api/v1/', include('sales.urls')),
    path('api/v1/', include('purchasing.urls')),
    path('api/v1/', include('incentives.urls')),

    # Notifications API
    path('api/v1/', include('notifications.urls')),

    # System settings
    path('api/v1/', include('platform_settings.urls')),
]
