"""
Sales Services

Customer records and the sales ledger.

Ledger rule:
    Customer.total_purchases == sum(total_amount of the customer's sales)

record_sale() and delete_sale() move the counter with a single
``UPDATE ... SET total_purchases = total_purchases + delta`` inside the same
transaction as the Sale insert/delete. There is no read-modify-write from
Python, so concurrent sales against one customer cannot lose an update.
"""

from decimal import Decimal, InvalidOperation
import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, F, Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from core.exceptions import Conflict, NotFound, ValidationFailed

from .models import Customer, Sale

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')

SALE_UPDATABLE_FIELDS = ('payment_status', 'payment_method', 'notes')
CUSTOMER_UPDATABLE_FIELDS = ('name', 'email', 'phone', 'address', 'notes')


def _money_sum(field):
    return Coalesce(Sum(field), ZERO)


# =============================================================================
# CUSTOMERS
# =============================================================================

def create_customer(*, name, phone, email='', address='', notes='', created_by=None):
    errors = {}
    if not name:
        errors['name'] = 'This field is required'
    if not phone:
        errors['phone'] = 'This field is required'
    if errors:
        raise ValidationFailed(details=errors)

    email = (email or '').strip().lower()
    if email and Customer.objects.filter(email__iexact=email).exists():
        raise Conflict('A customer with this email already exists', details={'email': email})

    try:
        with transaction.atomic():
            customer = Customer.objects.create(
                name=name,
                phone=phone,
                email=email,
                address=address or '',
                notes=notes or '',
                created_by=created_by,
            )
    except IntegrityError:
        raise Conflict('A customer with this email already exists', details={'email': email})

    logger.info(f"Created customer {customer.id} '{customer.name}'")
    return customer


def update_customer(customer_id, **changes):
    """Edit a customer's contact details. total_purchases is not editable."""
    if 'total_purchases' in changes:
        raise ValidationFailed(details={'total_purchases': 'This field is maintained by sales and cannot be set'})

    try:
        customer = Customer.objects.get(pk=customer_id)
    except Customer.DoesNotExist:
        raise NotFound('Customer not found')

    update_fields = []
    for field in CUSTOMER_UPDATABLE_FIELDS:
        if field not in changes or changes[field] is None:
            continue
        value = changes[field]
        if field in ('name', 'phone') and not value:
            raise ValidationFailed(details={field: 'This field may not be blank'})
        if field == 'email':
            value = value.strip().lower()
            if value and Customer.objects.filter(email__iexact=value).exclude(pk=customer.pk).exists():
                raise Conflict('A customer with this email already exists', details={'email': value})
        setattr(customer, field, value)
        update_fields.append(field)

    if update_fields:
        try:
            with transaction.atomic():
                customer.save(update_fields=update_fields + ['updated_at'])
        except IntegrityError:
            raise Conflict('A customer with this email already exists')
    return customer


def delete_customer(customer_id):
    """
    Hard-delete a customer. Already-deleted customers are a no-op.

    A customer that still has sales cannot be deleted: their ledger rows
    would be orphaned. Delete the sales first.

    Returns:
        True if a row was deleted, False if it was already gone
    """
    with transaction.atomic():
        customer = Customer.objects.select_for_update().filter(pk=customer_id).first()
        if customer is None:
            return False
        sale_count = customer.sales.count()
        if sale_count:
            raise Conflict(
                f'Customer has {sale_count} recorded sale(s) and cannot be deleted',
                details={'sales': sale_count}
            )
        customer.delete()
    logger.info(f"Deleted customer {customer_id}")
    return True


# =============================================================================
# SALES LEDGER
# =============================================================================

def adjust_total_purchases(customer_id, delta):
    """Apply ``total_purchases = total_purchases + delta`` as one SQL statement."""
    return Customer.objects.filter(pk=customer_id).update(
        total_purchases=F('total_purchases') + delta
    )


def _validate_sale(sale_type, quantity, unit_price, payment_status):
    """Returns (quantity, unit_price) coerced, or raises ValidationFailed."""
    errors = {}

    if sale_type not in Sale.SaleType.values:
        errors['sale_type'] = f"Invalid sale type. Must be one of: {', '.join(Sale.SaleType.values)}"

    if payment_status not in Sale.PaymentStatus.values:
        errors['payment_status'] = (
            f"Invalid payment status. Must be one of: {', '.join(Sale.PaymentStatus.values)}"
        )

    try:
        quantity_value = int(quantity)
        if isinstance(quantity, float) and quantity != quantity_value:
            raise ValueError
        if quantity_value < 1:
            errors['quantity'] = 'Quantity must be at least 1'
    except (TypeError, ValueError):
        errors['quantity'] = 'Quantity must be a whole number'
        quantity_value = None

    try:
        price_value = Decimal(str(unit_price))
        if not price_value.is_finite() or price_value <= 0:
            errors['unit_price'] = 'Unit price must be greater than 0'
        elif price_value.normalize().as_tuple().exponent < -2:
            errors['unit_price'] = 'Unit price cannot have more than 2 decimal places'
    except InvalidOperation:
        errors['unit_price'] = 'Unit price must be a number'
        price_value = None

    if errors:
        raise ValidationFailed(details=errors)
    return quantity_value, price_value


def record_sale(*, customer_id, sale_type, quantity, unit_price,
                payment_status=Sale.PaymentStatus.PENDING, payment_method='',
                notes='', sale_date=None, recorded_by=None):
    """
    Insert a Sale and add its total to the customer's total_purchases.

    Both writes commit together or not at all. total_amount is always
    computed here from quantity * unit_price.
    """
    quantity, unit_price = _validate_sale(sale_type, quantity, unit_price, payment_status)

    if not customer_id or not Customer.objects.filter(pk=customer_id).exists():
        raise NotFound('Customer not found')

    fields = {
        'customer_id': customer_id,
        'sale_type': sale_type,
        'quantity': quantity,
        'unit_price': unit_price,
        'payment_status': payment_status,
        'payment_method': payment_method or '',
        'notes': notes or '',
        'recorded_by': recorded_by,
    }
    if sale_date:
        fields['sale_date'] = sale_date

    with transaction.atomic():
        sale = Sale.objects.create(**fields)
        adjust_total_purchases(customer_id, sale.total_amount)

    logger.info(f"Recorded sale {sale.id} of {sale.total_amount} for customer {customer_id}")
    return sale


def update_sale(sale_id, **changes):
    """
    Update payment bookkeeping on a sale. Quantity, price and total are
    immutable, so the ledger is untouched.
    """
    immutable = set(changes) - set(SALE_UPDATABLE_FIELDS)
    if immutable:
        raise ValidationFailed(details={
            field: 'This field cannot be changed after the sale is recorded'
            for field in sorted(immutable)
        })

    if 'payment_status' in changes and changes['payment_status'] not in Sale.PaymentStatus.values:
        raise ValidationFailed(details={
            'payment_status': f"Invalid payment status. Must be one of: {', '.join(Sale.PaymentStatus.values)}"
        })

    try:
        sale = Sale.objects.get(pk=sale_id)
    except Sale.DoesNotExist:
        raise NotFound('Sale not found')

    update_fields = []
    for field in SALE_UPDATABLE_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(sale, field, changes[field])
            update_fields.append(field)

    if update_fields:
        sale.save(update_fields=update_fields + ['updated_at'])
    return sale


def delete_sale(sale_id):
    """
    Delete a sale and subtract its stored total_amount from the customer's
    total_purchases. Deleting an absent sale is a no-op.

    Returns:
        True if a sale was deleted, False if it was already gone
    """
    with transaction.atomic():
        sale = Sale.objects.select_for_update().filter(pk=sale_id).first()
        if sale is None:
            logger.info(f"Sale {sale_id} already deleted")
            return False

        customer_id = sale.customer_id
        amount = sale.total_amount
        sale.delete()
        adjust_total_purchases(customer_id, -amount)

    logger.info(f"Deleted sale {sale_id}, reversed {amount} for customer {customer_id}")
    return True


# =============================================================================
# SUMMARIES
# =============================================================================

def sales_summary(today=None):
    """All-time, today, month-to-date and pending totals, plus totals by sale type."""
    today = today or timezone.localdate()
    month_start = today.replace(day=1)

    totals = Sale.objects.aggregate(
        total=_money_sum('total_amount'),
        today=Coalesce(Sum('total_amount', filter=Q(sale_date=today)), ZERO),
        month=Coalesce(Sum('total_amount', filter=Q(sale_date__gte=month_start, sale_date__lte=today)), ZERO),
        pending_payments=Coalesce(
            Sum('total_amount', filter=Q(payment_status__in=[Sale.PaymentStatus.PENDING, Sale.PaymentStatus.PARTIAL])),
            ZERO
        ),
        count=Count('id'),
    )

    by_type = (
        Sale.objects
        .values('sale_type')
        .annotate(total=_money_sum('total_amount'), count=Count('id'), quantity=Sum('quantity'))
        .order_by('sale_type')
    )

    return {
        **totals,
        'by_type': list(by_type),
    }


# =============================================================================
# RECONCILIATION
# =============================================================================

def purchases_drift():
    """
    Customers whose stored total_purchases differs from the sum of their sales.

    Returns:
        List of (customer, stored, expected) tuples
    """
    drift = []
    customers = Customer.objects.annotate(expected=_money_sum('sales__total_amount'))
    for customer in customers:
        if customer.total_purchases != customer.expected:
            drift.append((customer, customer.total_purchases, customer.expected))
    return drift
