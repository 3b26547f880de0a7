"""
Public Order Models

Orders are placed from the storefront without an account. Each line item
snapshots the product label, unit and unit price at placement time, so later
price changes in site settings never alter a historical order.

Order Flow:
1. new        - placed by the customer, awaiting the farm
2. confirmed  - farm accepted the order
3. processing - order is being prepared
4. delivered  - customer received order (terminal)
5. cancelled  - cancelled from any non-terminal state (terminal)

Orders are a separate channel from Sales: they never touch
Customer.total_purchases.
"""

from decimal import Decimal
import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.crypto import get_random_string
from phonenumber_field.modelfields import PhoneNumberField

BASE36_ALPHABET = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ'


def to_base36(number):
    if number < 0:
        raise ValueError('Cannot encode a negative number')
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return ''.join(reversed(digits))


def generate_order_number(prefix=None):
    """Generate order number: {PREFIX}-{BASE36(epoch ms)}-{4 random base36 chars}"""
    prefix = prefix or settings.ORDER_NUMBER_PREFIX
    millis = int(timezone.now().timestamp() * 1000)
    random_part = get_random_string(4, allowed_chars=BASE36_ALPHABET)
    return f"{prefix}-{to_base36(millis)}-{random_part}"


# =============================================================================
# ORDER MODELS (Public Storefront - No Login Required)
# =============================================================================

class Order(models.Model):

    class Status(models.TextChoices):
        NEW = 'new', 'New'
        CONFIRMED = 'confirmed', 'Confirmed'
        PROCESSING = 'processing', 'Processing'
        DELIVERED = 'delivered', 'Delivered'
        CANCELLED = 'cancelled', 'Cancelled'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=40, unique=True, editable=False)

    # Contact and delivery info
    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField(blank=True, default='')
    customer_phone = PhoneNumberField(region='UG')
    delivery_address = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.NEW,
        db_index=True
    )

    # Pricing (computed from the item snapshot)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', '-created_at'], name='order_status_created_idx'),
        ]

    def __str__(self):
        return f"Order {self.order_number}"

    def save(self, *args, **kwargs):
        if not self.order_number:
            self.order_number = generate_order_number()
        super().save(*args, **kwargs)

    @property
    def is_terminal(self):
        return self.status in (self.Status.DELIVERED, self.Status.CANCELLED)


class OrderItem(models.Model):
    """Line items for orders. Immutable snapshot of the catalogue at order time."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='items'
    )

    # Snapshot of product at time of order
    product = models.CharField(max_length=50, help_text='Catalogue key (e.g., eggs_tray)')
    product_name = models.CharField(max_length=200)
    unit = models.CharField(max_length=20)
    unit_price = models.DecimalField(max_digits=14, decimal_places=2)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    line_total = models.DecimalField(max_digits=14, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_items'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"

    def save(self, *args, **kwargs):
        # Calculate line total
        self.line_total = Decimal(self.unit_price) * self.quantity
        super().save(*args, **kwargs)
