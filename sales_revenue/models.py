"""
Sales and Customer Models

Ledger rule:
    Customer.total_purchases == sum(Sale.total_amount) over the customer's sales

The counter is only moved by sales_revenue.services (record_sale / delete_sale)
as an atomic delta in the same transaction as the Sale write.
"""

from decimal import Decimal
import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from phonenumber_field.modelfields import PhoneNumberField

# Order models live in their own module
from .order_models import Order, OrderItem  # noqa: F401


class Customer(models.Model):
    """
    Customer model for tracking buyers of eggs, birds and manure.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Basic Information
    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True, default='')
    phone = PhoneNumberField(region='UG')
    address = models.TextField(blank=True)
    notes = models.TextField(blank=True, help_text='Additional notes about the customer')

    # Ledger (derived, maintained by sales services)
    total_purchases = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        editable=False
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_customers'
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['phone'], name='customer_phone_idx'),
            models.Index(fields=['name'], name='customer_name_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['email'],
                condition=~models.Q(email=''),
                name='customer_unique_email_when_set',
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.phone})"


class Sale(models.Model):
    """
    A recorded sale to a customer.
    total_amount is always quantity * unit_price, computed on save.
    """

    class SaleType(models.TextChoices):
        EGGS = 'eggs', 'Eggs'
        BIRDS = 'birds', 'Birds'
        MANURE = 'manure', 'Manure'
        OTHER = 'other', 'Other'

    class PaymentStatus(models.TextChoices):
        PENDING = 'pending', 'Pending'
        PARTIAL = 'partial', 'Partially Paid'
        PAID = 'paid', 'Paid'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name='sales'
    )

    sale_date = models.DateField(default=timezone.localdate, db_index=True)
    sale_type = models.CharField(max_length=20, choices=SaleType.choices, db_index=True)

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, editable=False)

    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        db_index=True
    )
    payment_method = models.CharField(
        max_length=50,
        blank=True,
        help_text='How the customer paid (e.g., Cash, Mobile Money, Bank Transfer)'
    )
    notes = models.TextField(blank=True)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recorded_sales'
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'sales'
        ordering = ['-sale_date', '-created_at']
        indexes = [
            models.Index(fields=['customer', '-sale_date'], name='sale_customer_date_idx'),
        ]

    def __str__(self):
        return f"{self.get_sale_type_display()} sale to {self.customer.name}: {self.total_amount}"

    def save(self, *args, **kwargs):
        # Calculate total
        self.total_amount = Decimal(self.quantity) * Decimal(self.unit_price)
        super().save(*args, **kwargs)
