"""
Expense Tracking Models

Farm operating costs, one row per payment.

TRACKED EXPENSE CATEGORIES:
===========================
1. FEED - Feed purchases not tied to a batch feed record
2. MEDICATION - Drugs, vaccines, vet fees
3. LABOR - Staff wages, casual workers
4. UTILITIES - Electricity, water, fuel
5. EQUIPMENT - Drinkers, feeders, incubators
6. TRANSPORT - Delivery and market trips
7. MAINTENANCE - Building and equipment repairs
8. OTHER - Anything else
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class ExpenseCategory(models.TextChoices):
    """Predefined expense categories for standardized tracking."""
    FEED = 'feed', 'Feed'
    MEDICATION = 'medication', 'Medication & Vaccines'
    LABOR = 'labor', 'Labor & Wages'
    UTILITIES = 'utilities', 'Utilities (Electricity, Water)'
    EQUIPMENT = 'equipment', 'Equipment'
    TRANSPORT = 'transport', 'Transport & Delivery'
    MAINTENANCE = 'maintenance', 'Repairs & Maintenance'
    OTHER = 'other', 'Other'


class Expense(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    date = models.DateField(default=timezone.localdate, db_index=True)
    category = models.CharField(
        max_length=20,
        choices=ExpenseCategory.choices,
        db_index=True
    )
    description = models.CharField(max_length=500)
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    payment_method = models.CharField(
        max_length=50,
        blank=True,
        help_text="e.g., Cash, Mobile Money, Bank Transfer"
    )
    receipt_number = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recorded_expenses'
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['category', '-date'], name='expense_category_date_idx'),
        ]

    def __str__(self):
        return f"{self.get_category_display()} - {self.amount} on {self.date}"
