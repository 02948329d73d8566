from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import UserViewSet, CompanyLogoView

router = DefaultRouter()
router.register(r'users', UserViewSet, basename='user')

urlpatterns = [
    path('company/logo/', CompanyLogoView.as_view(), name='company_logo'),
    path('', include(router.urls)),
]
