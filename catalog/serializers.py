from rest_framework import serializers
from .models import Product, WorkType


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for Product with computed margin fields."""
    margin_amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    margin_rate = serializers.DecimalField(max_digits=8, decimal_places=2, read_only=True)
    is_shared = serializers.SerializerMethodField()
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id',
            'name',
            'description',
            'sku',
            'category',
            'cost_price',
            'selling_price',
            'margin_amount',
            'margin_rate',
            'unit',
            'is_active',
            'incentive_rate',
            'min_quantity',
            'max_quantity',
            'tags',
            'company',
            'is_shared',
            'created_by',
            'created_by_name',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'company', 'created_by', 'created_at', 'updated_at']

    def get_is_shared(self, obj):
        return obj.company is None

    def get_created_by_name(self, obj):
        return obj.created_by.get_full_name() or obj.created_by.email if obj.created_by else None

    def validate(self, data):
        cost = data.get('cost_price', self.instance.cost_price if self.instance else None)
        selling = data.get('selling_price', self.instance.selling_price if self.instance else None)
        if cost is not None and selling is not None and selling <= cost:
            raise serializers.ValidationError({
                'selling_price': 'Selling price must be higher than cost price.'
            })

        min_quantity = data.get('min_quantity', self.instance.min_quantity if self.instance else 1)
        max_quantity = data.get('max_quantity', self.instance.max_quantity if self.instance else None)
        if max_quantity is not None and max_quantity < min_quantity:
            raise serializers.ValidationError({
                'max_quantity': 'Maximum quantity cannot be lower than minimum quantity.'
            })
        return data


class WorkTypeSerializer(serializers.ModelSerializer):

    class Meta:
        model = WorkType
        fields = [
            'id',
            'name',
            'description',
            'is_active',
            'sort_order',
            'company',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'company', 'created_by', 'created_at', 'updated_at']
