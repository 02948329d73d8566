from rest_framework import serializers

from api.serializers import UserSummarySerializer
from catalog.models import Product
from .models import Sale


class SaleSerializer(serializers.ModelSerializer):
    """Sale with computed totals and the salesperson's incentive."""
    sales_person = UserSummarySerializer(read_only=True)
    reviewed_by = UserSummarySerializer(read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_category = serializers.CharField(source='product.category', read_only=True)
    product_unit = serializers.CharField(source='product.unit', read_only=True)
    campaign_name = serializers.CharField(source='campaign.name', read_only=True, default=None)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    total_sales = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)
    total_cost = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)
    total_margin = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)
    margin_rate = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    incentive_amount = serializers.DecimalField(max_digits=18, decimal_places=0, read_only=True)

    class Meta:
        model = Sale
        fields = [
            'id',
            'sale_number',
            'product',
            'product_name',
            'product_category',
            'product_unit',
            'sales_person',
            'campaign',
            'campaign_name',
            'quantity',
            'actual_cost_price',
            'actual_selling_price',
            'total_sales',
            'total_cost',
            'total_margin',
            'margin_rate',
            'incentive_amount',
            'status',
            'status_display',
            'sale_date',
            'contract_start_date',
            'contract_end_date',
            'client_name',
            'client_contact',
            'client_email',
            'memo',
            'reviewed_by',
            'reviewed_at',
            'review_comment',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class SaleWriteSerializer(serializers.ModelSerializer):
    """
    Create and update sales.

    The product is fixed at creation; quantity must stay within the
    product's bounds and the selling price above the cost.
    """
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())

    class Meta:
        model = Sale
        fields = ['id', 'product', *Sale.CONTENT_FIELDS, *Sale.REVIEW_FIELDS]
        read_only_fields = ['id']

    def get_fields(self):
        fields = super().get_fields()
        if self.instance is not None:
            fields['product'].read_only = True
        return fields

    def validate_product(self, value):
        if not value.is_active:
            raise serializers.ValidationError('Invalid product.')
        return value

    def validate(self, data):
        product = data.get('product') or (self.instance.product if self.instance else None)
        quantity = data.get('quantity', self.instance.quantity if self.instance else 1)

        if product is not None:
            if quantity < product.min_quantity:
                raise serializers.ValidationError({
                    'quantity': f'Minimum quantity is {product.min_quantity}{product.unit}.'
                })
            if product.max_quantity and quantity > product.max_quantity:
                raise serializers.ValidationError({
                    'quantity': f'Maximum quantity is {product.max_quantity}{product.unit}.'
                })

        cost = data.get('actual_cost_price', self.instance.actual_cost_price if self.instance else None)
        selling = data.get('actual_selling_price', self.instance.actual_selling_price if self.instance else None)
        if self.instance is None and (cost is None or selling is None):
            raise serializers.ValidationError('Cost price and selling price are required.')
        if ('actual_cost_price' in data or 'actual_selling_price' in data) and selling <= cost:
            raise serializers.ValidationError({
                'actual_selling_price': 'Selling price must be higher than cost price.'
            })
        return data
