"""
Flock Management Services

Batch lifecycle plus append-only egg, feed and health records.

Live count rule:
    PoultryBatch.current_count == initial_count - sum(mortality_count)

record_health_event() is the only domain path that lowers current_count. It
inserts the HealthRecord and applies the decrement as one conditional
UPDATE inside the same transaction, so a concurrent writer can never drive
the count below zero. Mortality larger than the live count is rejected.

update_batch() may overwrite current_count directly. That is the
administrative correction path and is not used for domain events.
"""

from decimal import Decimal, InvalidOperation
import logging

from django.db import transaction
from django.db.models import F, Sum
from django.db.models.functions import Coalesce

from core.exceptions import NotFound, ValidationFailed

from .models import PoultryBatch, EggProductionRecord, FeedRecord, HealthRecord

logger = logging.getLogger(__name__)

BATCH_UPDATABLE_FIELDS = ('batch_name', 'bird_type', 'current_count', 'status', 'notes')


# =============================================================================
# HELPERS
# =============================================================================

def _to_int(value, field, errors, minimum=0):
    if value is None or value == '':
        errors[field] = 'This field is required'
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        errors[field] = 'Must be a whole number'
        return None
    if isinstance(value, float) and value != number:
        errors[field] = 'Must be a whole number'
        return None
    if number < minimum:
        errors[field] = f'Must be at least {minimum}'
        return None
    return number


def _to_decimal(value, field, errors, minimum=Decimal('0'), required=False):
    if value is None or value == '':
        if required:
            errors[field] = 'This field is required'
        return None
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        errors[field] = 'Must be a number'
        return None
    if not number.is_finite() or number < minimum:
        errors[field] = f'Must be at least {minimum}'
        return None
    return number


def _get_batch(batch_id):
    try:
        return PoultryBatch.objects.get(pk=batch_id)
    except (PoultryBatch.DoesNotExist, ValueError, TypeError):
        raise NotFound('Batch not found')


def _require_batch(batch_id):
    if not PoultryBatch.objects.filter(pk=batch_id).exists():
        raise NotFound('Batch not found')


# =============================================================================
# BATCHES
# =============================================================================

def create_batch(*, batch_name, bird_type, initial_count, date_acquired=None,
                 source='', cost_per_bird=None, notes='', created_by=None):
    """Create a batch; current_count starts equal to initial_count."""
    errors = {}
    if not batch_name:
        errors['batch_name'] = 'This field is required'
    if not bird_type:
        errors['bird_type'] = 'This field is required'
    initial_count = _to_int(initial_count, 'initial_count', errors, minimum=1)
    cost_per_bird = _to_decimal(cost_per_bird, 'cost_per_bird', errors)
    if errors:
        raise ValidationFailed(details=errors)

    fields = {
        'batch_name': batch_name,
        'bird_type': bird_type,
        'initial_count': initial_count,
        'current_count': initial_count,
        'source': source or '',
        'cost_per_bird': cost_per_bird,
        'notes': notes or '',
        'created_by': created_by,
    }
    if date_acquired:
        fields['date_acquired'] = date_acquired

    batch = PoultryBatch.objects.create(**fields)
    logger.info(f"Created batch {batch.id} '{batch.batch_name}' with {initial_count} birds")
    return batch


def update_batch(batch_id, **changes):
    """
    Update a batch's name, bird type, current count, status or notes.

    initial_count is write-once: sending a different value is rejected;
    sending the stored value is accepted and ignored.
    """
    with transaction.atomic():
        try:
            batch = PoultryBatch.objects.select_for_update().get(pk=batch_id)
        except (PoultryBatch.DoesNotExist, ValueError, TypeError):
            raise NotFound('Batch not found')

        errors = {}
        if 'initial_count' in changes and changes['initial_count'] is not None:
            try:
                requested = int(changes['initial_count'])
            except (TypeError, ValueError):
                requested = None
            if requested != batch.initial_count:
                errors['initial_count'] = 'Initial count cannot be changed after creation'

        unknown = set(changes) - set(BATCH_UPDATABLE_FIELDS) - {'initial_count'}
        for field in sorted(unknown):
            errors[field] = 'This field cannot be updated'

        update_fields = []
        for field in BATCH_UPDATABLE_FIELDS:
            if field not in changes or changes[field] is None:
                continue
            value = changes[field]
            if field == 'current_count':
                value = _to_int(value, 'current_count', errors, minimum=0)
                if value is not None and value > batch.initial_count:
                    errors['current_count'] = (
                        f'Current count ({value}) cannot exceed initial count ({batch.initial_count})'
                    )
                    continue
            elif field == 'status' and value not in PoultryBatch.Status.values:
                errors['status'] = f"Invalid status. Must be one of: {', '.join(PoultryBatch.Status.values)}"
                continue
            elif field in ('batch_name', 'bird_type') and not value:
                errors[field] = 'This field may not be blank'
                continue
            if field not in errors:
                setattr(batch, field, value)
                update_fields.append(field)

        if errors:
            raise ValidationFailed(details=errors)

        if update_fields:
            batch.save(update_fields=update_fields + ['updated_at'])
            if 'current_count' in update_fields:
                logger.warning(
                    f"Batch {batch.id} current_count corrected manually to {batch.current_count}"
                )
    return batch


def get_batch_detail(batch_id):
    """Batch with its egg, feed and health history."""
    batch = _get_batch(batch_id)
    return {
        'batch': batch,
        'egg_records': list(batch.egg_records.all()),
        'feed_records': list(batch.feed_records.all()),
        'health_records': list(batch.health_records.all()),
    }


# =============================================================================
# APPEND-ONLY RECORDS
# =============================================================================

def record_egg_production(*, batch_id, eggs_collected, date=None, broken_eggs=0,
                          notes='', recorded_by=None):
    errors = {}
    eggs_collected = _to_int(eggs_collected, 'eggs_collected', errors)
    broken_eggs = _to_int(broken_eggs if broken_eggs not in (None, '') else 0, 'broken_eggs', errors)
    if eggs_collected is not None and broken_eggs is not None and broken_eggs > eggs_collected:
        errors['broken_eggs'] = 'Broken eggs cannot exceed eggs collected'
    if errors:
        raise ValidationFailed(details=errors)
    _require_batch(batch_id)

    fields = {
        'batch_id': batch_id,
        'eggs_collected': eggs_collected,
        'broken_eggs': broken_eggs,
        'notes': notes or '',
        'recorded_by': recorded_by,
    }
    if date:
        fields['date'] = date
    return EggProductionRecord.objects.create(**fields)


def record_feed(*, batch_id, feed_type, quantity_kg, date=None, cost=None,
                supplier='', notes='', recorded_by=None):
    errors = {}
    if not feed_type:
        errors['feed_type'] = 'This field is required'
    quantity_kg = _to_decimal(quantity_kg, 'quantity_kg', errors, minimum=Decimal('0.01'), required=True)
    cost = _to_decimal(cost, 'cost', errors)
    if errors:
        raise ValidationFailed(details=errors)
    _require_batch(batch_id)

    fields = {
        'batch_id': batch_id,
        'feed_type': feed_type,
        'quantity_kg': quantity_kg,
        'cost': cost,
        'supplier': supplier or '',
        'notes': notes or '',
        'recorded_by': recorded_by,
    }
    if date:
        fields['date'] = date
    return FeedRecord.objects.create(**fields)


def decrement_live_count(batch_id, count):
    """
    Lower a batch's current_count by ``count`` in a single conditional UPDATE.

    Raises ValidationFailed when the batch has fewer than ``count`` live birds.
    """
    updated = PoultryBatch.objects.filter(
        pk=batch_id,
        current_count__gte=count
    ).update(current_count=F('current_count') - count)

    if not updated:
        live = PoultryBatch.objects.filter(pk=batch_id).values_list('current_count', flat=True).first()
        raise ValidationFailed(
            f'Mortality count ({count}) exceeds live birds in batch ({live})',
            details={'mortality_count': f'Cannot exceed current live count ({live})'}
        )
    return updated


def record_health_event(*, batch_id, record_type, description, date=None,
                        mortality_count=0, cost=None, administered_by='',
                        notes='', recorded_by=None):
    """
    Insert a HealthRecord and, when mortality_count > 0, lower the batch's
    live count by exactly that amount. Both writes commit together or not at all.
    """
    errors = {}
    if record_type not in HealthRecord.RecordType.values:
        errors['record_type'] = (
            f"Invalid record type. Must be one of: {', '.join(HealthRecord.RecordType.values)}"
        )
    if not description:
        errors['description'] = 'This field is required'
    mortality_count = _to_int(
        mortality_count if mortality_count not in (None, '') else 0,
        'mortality_count', errors
    )
    cost = _to_decimal(cost, 'cost', errors)
    if errors:
        raise ValidationFailed(details=errors)
    _require_batch(batch_id)

    fields = {
        'batch_id': batch_id,
        'record_type': record_type,
        'description': description,
        'mortality_count': mortality_count,
        'cost': cost,
        'administered_by': administered_by or '',
        'notes': notes or '',
        'recorded_by': recorded_by,
    }
    if date:
        fields['date'] = date

    with transaction.atomic():
        record = HealthRecord.objects.create(**fields)
        if mortality_count > 0:
            decrement_live_count(batch_id, mortality_count)

    if mortality_count > 0:
        logger.info(f"Recorded mortality of {mortality_count} birds for batch {batch_id}")
    return record


# =============================================================================
# RECONCILIATION
# =============================================================================

def live_count_drift():
    """
    Batches whose stored current_count differs from
    initial_count - sum(mortality_count).

    Manual corrections made through update_batch() show up here too.

    Returns:
        List of (batch, stored, expected) tuples
    """
    drift = []
    batches = PoultryBatch.objects.annotate(
        mortality=Coalesce(Sum('health_records__mortality_count'), 0)
    )
    for batch in batches:
        expected = max(batch.initial_count - batch.mortality, 0)
        if batch.current_count != expected:
            drift.append((batch, batch.current_count, expected))
    return drift
