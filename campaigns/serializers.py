from rest_framework import serializers
from django.contrib.auth import get_user_model

from api.serializers import UserSummarySerializer
from catalog.models import Product
from .models import Campaign, Post

User = get_user_model()


class PostSerializer(serializers.ModelSerializer):
    """Task (post) with its product summary."""
    product_name = serializers.CharField(source='product.name', read_only=True, default=None)
    campaign_name = serializers.CharField(source='campaign.name', read_only=True)
    is_completed = serializers.BooleanField(read_only=True)

    class Meta:
        model = Post
        fields = [
            'id',
            'campaign',
            'campaign_name',
            'title',
            'work_type',
            'topic_status',
            'outline',
            'outline_status',
            'published_url',
            'reject_reason',
            'images',
            'product',
            'product_name',
            'quantity',
            'start_date',
            'due_date',
            'is_completed',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'campaign', 'created_at', 'updated_at']


class PostCreateSerializer(serializers.ModelSerializer):
    """
    Create a task under a campaign.

    skip_approval registers the topic (and outline) as already approved.
    """
    skip_approval = serializers.BooleanField(write_only=True, required=False, default=False)
    product = serializers.PrimaryKeyRelatedField(
        queryset=Product.objects.all(), required=False, allow_null=True
    )

    class Meta:
        model = Post
        fields = [
            'id',
            'title',
            'work_type',
            'images',
            'product',
            'quantity',
            'start_date',
            'due_date',
            'skip_approval',
        ]

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Title is required.')
        return value

    def validate_quantity(self, value):
        return value or 1

    def create(self, validated_data):
        skip_approval = validated_data.pop('skip_approval', False)
        if skip_approval:
            validated_data['topic_status'] = Post.TOPIC_APPROVED
            validated_data['outline_status'] = Post.OUTLINE_APPROVED
        return super().create(validated_data)


class PostUpdateSerializer(serializers.ModelSerializer):

    class Meta:
        model = Post
        fields = [
            'title',
            'work_type',
            'outline',
            'published_url',
            'topic_status',
            'outline_status',
            'images',
            'product',
            'quantity',
            'start_date',
            'due_date',
        ]


class PostStatusSerializer(serializers.Serializer):
    """Client decision on a topic or outline. The reject reason is always overwritten."""
    topic_status = serializers.CharField(max_length=30, required=False, allow_blank=True)
    outline_status = serializers.CharField(max_length=30, required=False, allow_blank=True)
    reject_reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class CampaignListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for campaign listings"""
    manager = UserSummarySerializer(read_only=True)
    client = UserSummarySerializer(read_only=True)
    execution_status_display = serializers.CharField(source='get_execution_status_display', read_only=True)

    class Meta:
        model = Campaign
        fields = [
            'id',
            'name',
            'client_name',
            'manager',
            'client',
            'budget',
            'invoice_issued',
            'payment_completed',
            'execution_status',
            'execution_status_display',
            'created_at',
            'updated_at',
        ]


class CampaignDetailSerializer(serializers.ModelSerializer):
    """Full campaign with its tasks."""
    manager = UserSummarySerializer(read_only=True)
    client = UserSummarySerializer(read_only=True)
    posts = PostSerializer(many=True, read_only=True)
    execution_status_display = serializers.CharField(source='get_execution_status_display', read_only=True)
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Campaign
        fields = [
            'id',
            'name',
            'client_name',
            'manager',
            'client',
            'memo',
            'budget',
            'notes',
            'reminders',
            'chat_summary',
            'invoice_issued',
            'payment_completed',
            'invoice_date',
            'payment_date',
            'invoice_due_date',
            'payment_due_date',
            'execution_status',
            'execution_status_display',
            'execution_approved_at',
            'execution_completed_at',
            'posts',
            'created_by_name',
            'created_at',
            'updated_at',
        ]

    def get_created_by_name(self, obj):
        return obj.created_by.get_full_name() or obj.created_by.email if obj.created_by else None


class CampaignCreateSerializer(serializers.ModelSerializer):
    """
    Create a campaign for a client.

    manager defaults to the requesting user when omitted.
    """
    manager = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), required=False)
    client = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())

    class Meta:
        model = Campaign
        fields = [
            'id',
            'name',
            'client_name',
            'manager',
            'client',
            'memo',
            'budget',
            'notes',
            'reminders',
            'invoice_issued',
            'payment_completed',
            'invoice_due_date',
            'payment_due_date',
        ]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required.')
        return value


class CampaignUpdateSerializer(serializers.ModelSerializer):
    """Only the manager-side fields are writable after creation."""

    class Meta:
        model = Campaign
        fields = Campaign.EDITABLE_FIELDS


class ChatContentSerializer(serializers.ModelSerializer):

    class Meta:
        model = Campaign
        fields = ['chat_content', 'chat_summary', 'chat_attachments']
        extra_kwargs = {
            'chat_content': {'required': False, 'allow_null': True},
            'chat_summary': {'required': False, 'allow_null': True},
            'chat_attachments': {'required': False, 'allow_null': True},
        }

    def validate(self, data):
        # Missing or null entries clear the stored value
        return {field: data.get(field) or '' for field in self.Meta.fields}
