from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_nested import routers as nested_routers
from .views import CampaignViewSet, CampaignPostViewSet, PostViewSet

router = DefaultRouter()
router.register(r'campaigns', CampaignViewSet, basename='campaign')
router.register(r'posts', PostViewSet, basename='post')

# Nested route for tasks of a campaign
campaigns_router = nested_routers.NestedDefaultRouter(router, r'campaigns', lookup='campaign')
campaigns_router.register(r'posts', CampaignPostViewSet, basename='campaign-posts')

urlpatterns = [
    path('', include(router.urls)),
    path('', include(campaigns_router.urls)),
]
