from decimal import Decimal

from rest_framework import serializers

from api.serializers import UserSummarySerializer
from .models import PurchaseRequest


class PurchaseRequestSerializer(serializers.ModelSerializer):
    """Purchase request with requester/approver summaries."""
    requester = UserSummarySerializer(read_only=True)
    approver = UserSummarySerializer(read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    campaign_name = serializers.CharField(source='campaign.name', read_only=True, default=None)
    post_title = serializers.CharField(source='post.title', read_only=True, default=None)

    class Meta:
        model = PurchaseRequest
        fields = [
            'id',
            'title',
            'description',
            'amount',
            'currency',
            'resource_type',
            'priority',
            'status',
            'status_display',
            'requested_date',
            'due_date',
            'approved_date',
            'completed_date',
            'approver_comment',
            'reject_reason',
            'attachments',
            'actual_amount',
            'receipt_url',
            'billed_to_client',
            'client_bill_amount',
            'requester',
            'approver',
            'campaign',
            'campaign_name',
            'post',
            'post_title',
            'sale',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PurchaseRequestWriteSerializer(serializers.ModelSerializer):
    """
    Create and update purchase requests.

    Review fields are accepted here; the view decides whether the caller
    may set them.
    """

    class Meta:
        model = PurchaseRequest
        fields = ['id', *PurchaseRequest.CONTENT_FIELDS, *PurchaseRequest.REVIEW_FIELDS]
        read_only_fields = ['id']

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Title is required.')
        return value

    def validate_amount(self, value):
        if value is None or value <= Decimal('0'):
            raise serializers.ValidationError('Amount must be greater than 0.')
        return value
