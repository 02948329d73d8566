import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from api.events import publish
from api.scoping import Operation
from api.viewsets import ScopedViewSet
from . import events
from .filters import CampaignFilter, PostFilter
from .models import Campaign, Post
from .serializers import (
    CampaignListSerializer,
    CampaignDetailSerializer,
    CampaignCreateSerializer,
    CampaignUpdateSerializer,
    ChatContentSerializer,
    PostSerializer,
    PostCreateSerializer,
    PostUpdateSerializer,
    PostStatusSerializer,
)
from .services import build_financial_summary

logger = logging.getLogger(__name__)


def publish_post_changes(post, before, actor):
    """Publish the events implied by a task going from `before` to its current state."""
    for field in ('topic_status', 'outline_status'):
        new = getattr(post, field)
        if new and new != before[field]:
            publish(events.post_status_changed, Post, post=post, field=field,
                    old=before[field], new=new, actor=actor)
    if post.outline and not before['outline']:
        publish(events.outline_submitted, Post, post=post, actor=actor)
    if post.published_url and not before['published_url']:
        publish(events.result_submitted, Post, post=post, actor=actor)


def check_product(view, data):
    if data.get('product') is not None:
        view.ensure_allowed(Operation.VIEW, data['product'], 'product')


def snapshot(post):
    return {
        'topic_status': post.topic_status,
        'outline_status': post.outline_status,
        'outline': post.outline,
        'published_url': post.published_url,
    }


class CampaignViewSet(ScopedViewSet):
    """
    Campaigns with scope-based access.

    - list/retrieve: campaigns in the caller's scope (clients see their own)
    - create: manager and client must fall inside the creator's scope
    - update: billing and note fields only
    - chat-content, financial-summary: anyone who can view the campaign
    """
    queryset = Campaign.objects.all()
    resource_kind = 'campaign'
    filterset_class = CampaignFilter
    search_fields = ['name', 'client_name', 'manager__email', 'client__email']
    ordering_fields = ['created_at', 'updated_at', 'name', 'budget']
    ordering = ['-created_at']
    select_related_fields = ['manager__profile', 'client__profile', 'created_by']

    def get_serializer_class(self):
        if self.action == 'list':
            return CampaignListSerializer
        if self.action == 'create':
            return CampaignCreateSerializer
        if self.action in ('update', 'partial_update'):
            return CampaignUpdateSerializer
        if self.action == 'chat_content':
            return ChatContentSerializer
        return CampaignDetailSerializer

    def get_operation(self):
        if self.action == 'chat_content' and self.request.method == 'PUT':
            return Operation.UPDATE
        return super().get_operation()

    def get_create_kwargs(self, serializer):
        kwargs = {
            'manager': serializer.validated_data.get('manager') or self.request.user,
            'created_by': self.request.user,
        }
        kwargs.update(Campaign().billing_dates_for(serializer.validated_data))
        return kwargs

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        campaign = serializer.instance
        logger.info(f"Campaign {campaign.pk} created by user {request.user.pk} for client {campaign.client_id}")
        publish(events.campaign_created, Campaign, campaign=campaign, actor=request.user)
        return Response(CampaignDetailSerializer(campaign).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save(**instance.billing_dates_for(serializer.validated_data))
        return Response(CampaignDetailSerializer(serializer.instance).data)

    def perform_destroy(self, instance):
        logger.info(f"Campaign {instance.pk} deleted by user {self.request.user.pk}")
        instance.delete()

    @action(detail=True, methods=['get', 'put'], url_path='chat-content')
    def chat_content(self, request, pk=None):
        """Messenger log, summary and attachment notes of a campaign."""
        campaign = self.get_object()
        if request.method == 'PUT':
            serializer = self.get_serializer(campaign, data=request.data)
            serializer.is_valid(raise_exception=True)
            serializer.save()
        return Response(ChatContentSerializer(campaign).data)

    @action(detail=True, methods=['get'], url_path='financial-summary')
    def financial_summary(self, request, pk=None):
        campaign = self.get_object()
        return Response(build_financial_summary(campaign))


class CampaignPostViewSet(ScopedViewSet):
    """
    Tasks of one campaign (/campaigns/{campaign_pk}/posts/).

    Creation requires 'create' on the task as it would be stored, which
    resolves through the parent campaign's manager and client.
    """
    resource_kind = 'post'
    queryset = Post.objects.all()
    http_method_names = ['get', 'post', 'head', 'options']
    select_related_fields = ['campaign', 'product']

    def get_serializer_class(self):
        if self.action == 'create':
            return PostCreateSerializer
        return PostSerializer

    def get_base_queryset(self):
        return super().get_base_queryset().filter(campaign_id=self.kwargs['campaign_pk'])

    def get_campaign(self):
        return get_object_or_404(
            Campaign.objects.select_related('manager__profile', 'client__profile'),
            pk=self.kwargs['campaign_pk']
        )

    def get_create_kwargs(self, serializer):
        return {'campaign': self.get_campaign()}

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        check_product(self, serializer.validated_data)
        self.perform_create(serializer)
        post = serializer.instance
        publish(events.post_created, Post, post=post, actor=request.user)
        return Response(PostSerializer(post).data, status=status.HTTP_201_CREATED)


class PostViewSet(ScopedViewSet):
    """
    Tasks across campaigns, scoped through the parent campaign.

    Tasks are created under their campaign; the `status` action is the
    client's approve/reject decision.
    """
    queryset = Post.objects.all()
    resource_kind = 'post'
    filterset_class = PostFilter
    search_fields = ['title', 'campaign__name']
    ordering_fields = ['created_at', 'due_date', 'title']
    ordering = ['-created_at']
    http_method_names = ['get', 'put', 'patch', 'delete', 'head', 'options']
    select_related_fields = ['campaign', 'product']
    object_operations = {
        **ScopedViewSet.object_operations,
        'update_status': Operation.APPROVE_AS_CLIENT,
    }

    def get_serializer_class(self):
        if self.action in ('update', 'partial_update'):
            return PostUpdateSerializer
        if self.action == 'update_status':
            return PostStatusSerializer
        return PostSerializer

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        post = self.get_object()
        before = snapshot(post)
        serializer = self.get_serializer(post, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        check_product(self, serializer.validated_data)
        serializer.save()
        publish_post_changes(post, before, request.user)
        return Response(PostSerializer(post).data)

    @action(detail=True, methods=['put', 'patch'], url_path='status')
    def update_status(self, request, pk=None):
        """Approve or reject a topic or outline."""
        post = self.get_object()
        before = snapshot(post)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if data.get('topic_status'):
            post.topic_status = data['topic_status']
        if data.get('outline_status'):
            post.outline_status = data['outline_status']
        post.reject_reason = data.get('reject_reason') or ''
        post.save(update_fields=['topic_status', 'outline_status', 'reject_reason', 'updated_at'])

        logger.info(
            f"Post {post.pk} status set by user {request.user.pk}: "
            f"topic='{post.topic_status}', outline='{post.outline_status}'"
        )
        publish_post_changes(post, before, request.user)
        return Response(PostSerializer(post).data)
