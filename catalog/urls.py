from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ProductViewSet, WorkTypeViewSet

router = DefaultRouter()
router.register(r'products', ProductViewSet, basename='product')
router.register(r'work-types', WorkTypeViewSet, basename='work-type')

urlpatterns = [
    path('', include(router.urls)),
]
