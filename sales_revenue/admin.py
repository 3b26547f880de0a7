from django.contrib import admin

from .models import Customer, Sale
from .order_models import Order, OrderItem


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ('name', 'phone', 'email', 'total_purchases', 'created_at')
    search_fields = ('name', 'phone', 'email')
    readonly_fields = ('total_purchases', 'created_by', 'created_at', 'updated_at')


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ('customer', 'sale_date', 'sale_type', 'quantity', 'unit_price', 'total_amount', 'payment_status')
    list_filter = ('sale_type', 'payment_status')
    search_fields = ('customer__name', 'notes')
    date_hierarchy = 'sale_date'
    readonly_fields = ('total_amount', 'recorded_by', 'created_at', 'updated_at')

    # Sales go through the API so the customer ledger stays in step
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ('product', 'product_name', 'unit', 'unit_price', 'quantity', 'line_total')

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('order_number', 'customer_name', 'customer_phone', 'total_amount', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('order_number', 'customer_name', 'customer_phone')
    readonly_fields = (
        'order_number', 'status', 'total_amount', 'created_at', 'updated_at',
        'confirmed_at', 'delivered_at', 'cancelled_at'
    )
    inlines = [OrderItemInline]
