from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import MonthlyIncentiveViewSet

router = DefaultRouter()
router.register(r'monthly-incentives', MonthlyIncentiveViewSet, basename='monthly-incentive')

urlpatterns = [
    path('', include(router.urls)),
]
