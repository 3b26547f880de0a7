"""
Flock Management Models

A PoultryBatch is a cohort of birds acquired together and tracked as a unit.
Egg, feed and health records are append-only observations against a batch.

Live count rule:
    current_count = initial_count - sum(HealthRecord.mortality_count)
Only a health record with mortality may lower current_count (see services).
"""

from decimal import Decimal
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class PoultryBatch(models.Model):
    """
    Represents a batch/group of birds managed together.
    Birds are not tracked individually but as cohorts.
    """

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        SOLD = 'sold', 'Sold'
        ARCHIVED = 'archived', 'Archived'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Batch Identification
    batch_name = models.CharField(max_length=100)
    bird_type = models.CharField(
        max_length=50,
        help_text="Bird type (e.g., Layers, Broilers, Kienyeji)"
    )

    # Bird Counts
    initial_count = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Number of birds at acquisition. Cannot change after creation."
    )
    current_count = models.IntegerField(
        help_text="Live birds. Lowered only by recorded mortality."
    )

    # Acquisition Details
    date_acquired = models.DateField(default=timezone.localdate)
    source = models.CharField(max_length=200, blank=True)
    cost_per_bird = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )

    notes = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_batches'
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'poultry_batches'
        ordering = ['-created_at']
        verbose_name = 'Poultry Batch'
        verbose_name_plural = 'Poultry Batches'
        indexes = [
            models.Index(fields=['status', '-created_at'], name='batch_status_created_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(current_count__gte=0),
                name='batch_current_count_non_negative',
            ),
        ]

    def __str__(self):
        return f"{self.batch_name} ({self.bird_type})"

    def save(self, *args, **kwargs):
        if self._state.adding and self.current_count is None:
            self.current_count = self.initial_count
        super().save(*args, **kwargs)

    def clean(self):
        """Validate bird counts"""
        errors = {}

        if self.initial_count is not None and self.initial_count < 1:
            errors['initial_count'] = 'Initial count must be at least 1'

        if self.current_count is not None:
            if self.current_count < 0:
                errors['current_count'] = 'Current count cannot be negative'
            elif self.initial_count is not None and self.current_count > self.initial_count:
                errors['current_count'] = (
                    f'Current count ({self.current_count}) cannot exceed initial count ({self.initial_count})'
                )

        if errors:
            raise ValidationError(errors)

    @property
    def mortality_total(self):
        return self.initial_count - self.current_count


class EggProductionRecord(models.Model):
    """Eggs collected from a batch on a given day."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    batch = models.ForeignKey(
        PoultryBatch,
        on_delete=models.PROTECT,
        related_name='egg_records'
    )
    date = models.DateField(default=timezone.localdate, db_index=True)
    eggs_collected = models.PositiveIntegerField()
    broken_eggs = models.PositiveIntegerField(default=0)
    notes = models.TextField(blank=True)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='egg_records'
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'egg_production'
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.batch.batch_name} - {self.date}: {self.eggs_collected} eggs"

    def clean(self):
        if self.broken_eggs > self.eggs_collected:
            raise ValidationError({
                'broken_eggs': 'Broken eggs cannot exceed eggs collected'
            })

    @property
    def good_eggs(self):
        return self.eggs_collected - self.broken_eggs


class FeedRecord(models.Model):
    """Feed given to a batch."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    batch = models.ForeignKey(
        PoultryBatch,
        on_delete=models.PROTECT,
        related_name='feed_records'
    )
    date = models.DateField(default=timezone.localdate, db_index=True)
    feed_type = models.CharField(max_length=100)
    quantity_kg = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    cost = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )
    supplier = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='feed_records'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'feed_records'
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.batch.batch_name} - {self.date}: {self.quantity_kg}kg {self.feed_type}"


class HealthRecord(models.Model):
    """
    Health event for a batch (vaccination, medication, checkup, mortality...).
    A record with mortality_count > 0 lowers the batch's current_count.
    """

    class RecordType(models.TextChoices):
        VACCINATION = 'vaccination', 'Vaccination'
        MEDICATION = 'medication', 'Medication'
        CHECKUP = 'checkup', 'Checkup'
        MORTALITY = 'mortality', 'Mortality'
        OTHER = 'other', 'Other'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    batch = models.ForeignKey(
        PoultryBatch,
        on_delete=models.PROTECT,
        related_name='health_records'
    )
    date = models.DateField(default=timezone.localdate, db_index=True)
    record_type = models.CharField(
        max_length=20,
        choices=RecordType.choices,
        db_index=True
    )
    description = models.TextField()
    mortality_count = models.PositiveIntegerField(default=0)
    cost = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )
    administered_by = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='health_records'
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'health_records'
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.batch.batch_name} - {self.get_record_type_display()} ({self.date})"
