"""
Expense Services

Recording and editing farm expenses, and the summary used by the
expenses page and the dashboard.
"""

from decimal import Decimal, InvalidOperation
import logging

from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from core.exceptions import NotFound, ValidationFailed

from .models import Expense, ExpenseCategory

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')

EXPENSE_FIELDS = ('date', 'category', 'description', 'amount', 'payment_method', 'receipt_number', 'notes')


def _clean_amount(value, errors):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError):
        errors['amount'] = 'Amount must be a number'
        return None
    if not amount.is_finite() or amount <= 0:
        errors['amount'] = 'Amount must be greater than 0'
        return None
    if amount.normalize().as_tuple().exponent < -2:
        errors['amount'] = 'Amount cannot have more than 2 decimal places'
        return None
    return amount


def _get_expense(expense_id):
    try:
        return Expense.objects.get(pk=expense_id)
    except Expense.DoesNotExist:
        raise NotFound('Expense not found')


def record_expense(*, category, description, amount, date=None, payment_method='',
                   receipt_number='', notes='', recorded_by=None):
    errors = {}
    if category not in ExpenseCategory.values:
        errors['category'] = f"Invalid category. Must be one of: {', '.join(ExpenseCategory.values)}"
    if not description:
        errors['description'] = 'This field is required'
    amount = _clean_amount(amount, errors)
    if errors:
        raise ValidationFailed('Date, category, description, and amount are required', details=errors)

    fields = {
        'category': category,
        'description': description,
        'amount': amount,
        'payment_method': payment_method or '',
        'receipt_number': receipt_number or '',
        'notes': notes or '',
        'recorded_by': recorded_by,
    }
    if date:
        fields['date'] = date

    expense = Expense.objects.create(**fields)
    logger.info(f"Recorded {expense.category} expense {expense.id} of {expense.amount}")
    return expense


def update_expense(expense_id, **changes):
    expense = _get_expense(expense_id)

    errors = {}
    update_fields = []
    for field in EXPENSE_FIELDS:
        if field not in changes or changes[field] is None:
            continue
        value = changes[field]
        if field == 'amount':
            value = _clean_amount(value, errors)
        elif field == 'category' and value not in ExpenseCategory.values:
            errors['category'] = f"Invalid category. Must be one of: {', '.join(ExpenseCategory.values)}"
        elif field == 'description' and not value:
            errors['description'] = 'This field may not be blank'
        if field not in errors:
            setattr(expense, field, value)
            update_fields.append(field)

    if errors:
        raise ValidationFailed(details=errors)

    if update_fields:
        expense.save(update_fields=update_fields + ['updated_at'])
    return expense


def delete_expense(expense_id):
    """Returns True if an expense was deleted, False if it was already gone."""
    deleted, _ = Expense.objects.filter(pk=expense_id).delete()
    if deleted:
        logger.info(f"Deleted expense {expense_id}")
    return bool(deleted)


def expense_summary(today=None):
    """All-time, today and month-to-date totals plus totals by category."""
    today = today or timezone.localdate()
    month_start = today.replace(day=1)

    totals = Expense.objects.aggregate(
        total=Coalesce(Sum('amount'), ZERO),
        today=Coalesce(Sum('amount', filter=Q(date=today)), ZERO),
        month=Coalesce(Sum('amount', filter=Q(date__gte=month_start, date__lte=today)), ZERO),
        count=Count('id'),
    )

    by_category = (
        Expense.objects
        .values('category')
        .annotate(total=Coalesce(Sum('amount'), ZERO), count=Count('id'))
        .order_by('-total')
    )

    return {
        **totals,
        'by_category': list(by_category),
    }
