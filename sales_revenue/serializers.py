"""
Serializers for customers, sales and public orders.

Input serializers only shape and type-check requests; ledger rules and
order pricing live in sales_revenue.services and sales_revenue.order_services.
"""

from decimal import Decimal

from phonenumber_field.serializerfields import PhoneNumberField
from rest_framework import serializers

from .catalog import PRODUCTS
from .models import Customer, Sale
from .order_models import Order, OrderItem


# =============================================================================
# CUSTOMERS
# =============================================================================

class CustomerSerializer(serializers.ModelSerializer):
    phone = serializers.CharField(read_only=True)
    sales_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Customer
        fields = [
            'id', 'name', 'email', 'phone', 'address', 'notes',
            'total_purchases', 'sales_count', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class CustomerCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    phone = PhoneNumberField(region='UG')
    email = serializers.EmailField(required=False, allow_blank=True, default='')
    address = serializers.CharField(required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class CustomerUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False)
    phone = PhoneNumberField(region='UG', required=False)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    total_purchases = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)


# =============================================================================
# SALES
# =============================================================================

class SaleSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    sale_type_display = serializers.CharField(source='get_sale_type_display', read_only=True)
    payment_status_display = serializers.CharField(source='get_payment_status_display', read_only=True)

    class Meta:
        model = Sale
        fields = [
            'id', 'customer', 'customer_name', 'sale_date', 'sale_type', 'sale_type_display',
            'quantity', 'unit_price', 'total_amount', 'payment_status', 'payment_status_display',
            'payment_method', 'notes', 'recorded_by', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class SaleCreateSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
    sale_date = serializers.DateField(required=False)
    sale_type = serializers.ChoiceField(choices=Sale.SaleType.choices)
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    payment_status = serializers.ChoiceField(
        choices=Sale.PaymentStatus.choices, required=False, default=Sale.PaymentStatus.PENDING
    )
    payment_method = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class SaleUpdateSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=Sale.PaymentStatus.choices, required=False)
    payment_method = serializers.CharField(max_length=50, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        # Anything else in the payload is an attempt to edit the ledger amount
        locked = sorted(set(self.initial_data) - set(self.fields))
        if locked:
            raise serializers.ValidationError({
                field: 'This field cannot be changed after the sale is recorded'
                for field in locked
            })
        return attrs


# =============================================================================
# ORDERS
# =============================================================================

class OrderItemSerializer(serializers.ModelSerializer):

    class Meta:
        model = OrderItem
        fields = ['id', 'product', 'product_name', 'unit', 'unit_price', 'quantity', 'line_total']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    customer_phone = serializers.CharField(read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'customer_name', 'customer_email', 'customer_phone',
            'delivery_address', 'items', 'total_amount', 'notes', 'status', 'status_display',
            'created_at', 'updated_at', 'confirmed_at', 'delivered_at', 'cancelled_at'
        ]
        read_only_fields = fields


class OrderItemInputSerializer(serializers.Serializer):
    product = serializers.ChoiceField(choices=[product.key for product in PRODUCTS])
    quantity = serializers.IntegerField(min_value=1)


class PlaceOrderSerializer(serializers.Serializer):
    """Storefront checkout. Any client-side price or total is ignored."""
    customer_name = serializers.CharField(max_length=200)
    customer_phone = PhoneNumberField(region='UG')
    customer_email = serializers.EmailField(required=False, allow_blank=True, default='')
    delivery_address = serializers.CharField(required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    items = OrderItemInputSerializer(many=True, allow_empty=False)


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)
