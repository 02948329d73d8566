from rest_framework import serializers

from api.serializers import UserSummarySerializer
from .models import MonthlyIncentive


class MonthlyIncentiveSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    approved_by = UserSummarySerializer(read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    final_amount = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)

    class Meta:
        model = MonthlyIncentive
        fields = [
            'id',
            'year',
            'month',
            'user',
            'total_sales',
            'total_cost',
            'total_margin',
            'incentive_rate',
            'incentive_amount',
            'adjustment_amount',
            'adjustment_reason',
            'final_amount',
            'sales_count',
            'status',
            'status_display',
            'payment_date',
            'payment_method',
            'payment_memo',
            'approved_by',
            'approved_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class MonthlyIncentiveUpdateSerializer(serializers.ModelSerializer):
    """Fields a reviewing admin may change."""

    class Meta:
        model = MonthlyIncentive
        fields = [
            'adjustment_amount',
            'adjustment_reason',
            'status',
            'payment_date',
            'payment_method',
            'payment_memo',
        ]


class CalculateIncentivesSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)
    user_ids = serializers.ListField(child=serializers.IntegerField(), required=False, allow_empty=True)
