"""
Public Order Services

Placing storefront orders, moving them through the order lifecycle, and
dispatching the farm notification.

Prices are never taken from the client: each line item is priced from the
``order_price_<product>`` site setting (catalogue default as fallback) and
snapshotted into the OrderItem row.
"""

from decimal import Decimal
from functools import partial
import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from cms.services import get_order_price
from core.exceptions import Conflict, NotFound, ValidationFailed
from core.transitions import (
    ORDER_STATUS_TRANSITIONS,
    RetryableError,
    retry_on_failure,
    validate_status_transition,
)

from .catalog import get_product
from .order_models import Order, OrderItem, generate_order_number

logger = logging.getLogger(__name__)


class OrderNumberCollision(RetryableError, Conflict):
    """Generated order number already exists. Safe to retry with a new one."""
    default_code = 'order_number_collision'
    default_message = 'Could not allocate a unique order number'


# Timestamp stamped on entering each status
STATUS_TIMESTAMP_FIELDS = {
    Order.Status.CONFIRMED: 'confirmed_at',
    Order.Status.DELIVERED: 'delivered_at',
    Order.Status.CANCELLED: 'cancelled_at',
}


# =============================================================================
# PLACING ORDERS
# =============================================================================

def _price_items(items):
    """
    Validate requested items and resolve server-side prices.

    Returns:
        List of dicts ready for OrderItem creation
    """
    if not isinstance(items, (list, tuple)) or not items:
        raise ValidationFailed(details={'items': 'At least one item is required'})

    priced = []
    errors = {}
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            errors[str(index)] = 'Each item must be an object with a product and quantity'
            continue

        product = get_product(item.get('product'))
        if product is None:
            errors[str(index)] = f"Unknown product: {item.get('product')}"
            continue

        quantity = item.get('quantity')
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            try:
                quantity = int(str(quantity))
            except (TypeError, ValueError):
                quantity = None
        if quantity is None or quantity < 1:
            errors[str(index)] = 'Quantity must be a whole number of at least 1'
            continue

        unit_price = get_order_price(product.key)
        priced.append({
            'product': product.key,
            'product_name': product.label,
            'unit': product.unit,
            'unit_price': unit_price,
            'quantity': quantity,
        })

    if errors:
        raise ValidationFailed(
            'Each item must have a known product and quantity >= 1',
            details={'items': errors}
        )
    return priced


def _insert_order(fields):
    """
    Insert the order row with a freshly generated order number.

    Runs in its own savepoint so a unique violation leaves the surrounding
    transaction usable for the next attempt.
    """
    order_number = generate_order_number()
    try:
        with transaction.atomic():
            return Order.objects.create(order_number=order_number, **fields)
    except IntegrityError:
        if Order.objects.filter(order_number=order_number).exists():
            logger.warning(f"Order number collision on {order_number}")
            raise OrderNumberCollision(details={'order_number': order_number})
        raise


def place_order(*, customer_name, customer_phone, items, customer_email='',
                delivery_address='', notes=''):
    """
    Create an order in status ``new`` with priced line items.

    The notification task is queued only after the transaction commits and
    its failure never affects the order.
    """
    errors = {}
    if not customer_name:
        errors['customer_name'] = 'This field is required'
    if not customer_phone:
        errors['customer_phone'] = 'This field is required'
    if errors:
        raise ValidationFailed('Customer name, phone, and at least one item are required', details=errors)

    priced_items = _price_items(items)
    total = sum((item['unit_price'] * item['quantity'] for item in priced_items), Decimal('0.00'))

    fields = {
        'customer_name': customer_name,
        'customer_phone': customer_phone,
        'customer_email': customer_email or '',
        'delivery_address': delivery_address or '',
        'notes': notes or '',
        'status': Order.Status.NEW,
        'total_amount': total,
    }

    insert = retry_on_failure(
        max_retries=max(settings.ORDER_NUMBER_MAX_ATTEMPTS - 1, 0),
        base_delay=0,
        retryable_exceptions=(OrderNumberCollision,),
    )(_insert_order)

    with transaction.atomic():
        order = insert(fields)
        for item in priced_items:
            OrderItem.objects.create(order=order, **item)
        transaction.on_commit(partial(dispatch_order_notification, order.id))

    logger.info(f"Order {order.order_number} placed by {customer_name} for {total}")
    return order


def dispatch_order_notification(order_id):
    """Queue the farm notification. Broker failures are logged, never raised."""
    from .tasks import send_order_notification

    try:
        send_order_notification.delay(str(order_id))
    except Exception as e:
        logger.error(f"Failed to queue notification for order {order_id}: {e}", exc_info=True)


# =============================================================================
# LIFECYCLE
# =============================================================================

def update_order_status(order_id, new_status):
    """
    Move an order along the lifecycle.

    Setting the current status again is a no-op. Any edge outside the
    forward/cancel graph raises InvalidStatusTransition.
    """
    if new_status not in Order.Status.values:
        raise ValidationFailed(
            'Invalid status',
            details={'status': f"Must be one of: {', '.join(Order.Status.values)}"}
        )

    with transaction.atomic():
        try:
            order = Order.objects.select_for_update().get(pk=order_id)
        except Order.DoesNotExist:
            raise NotFound('Order not found')

        if order.status == new_status:
            return order

        validate_status_transition(order.status, new_status, ORDER_STATUS_TRANSITIONS, 'order')

        previous = order.status
        order.status = new_status
        update_fields = ['status', 'updated_at']
        timestamp_field = STATUS_TIMESTAMP_FIELDS.get(new_status)
        if timestamp_field:
            setattr(order, timestamp_field, timezone.now())
            update_fields.append(timestamp_field)
        order.save(update_fields=update_fields)

    logger.info(f"Order {order.order_number} status {previous} -> {new_status}")
    return order


def delete_order(order_id):
    """
    Hard-delete an order in any state. Absent orders are a no-op.

    Returns:
        True if an order was deleted, False if it was already gone
    """
    deleted, _ = Order.objects.filter(pk=order_id).delete()
    if deleted:
        logger.info(f"Deleted order {order_id}")
    return bool(deleted)


# =============================================================================
# QUERIES
# =============================================================================

def list_orders(status=None):
    queryset = Order.objects.prefetch_related('items')
    if status and status != 'all':
        if status not in Order.Status.values:
            raise ValidationFailed(
                'Invalid status filter',
                details={'status': f"Must be one of: all, {', '.join(Order.Status.values)}"}
            )
        queryset = queryset.filter(status=status)
    return queryset.order_by('-created_at')


def get_order(order_id):
    try:
        return Order.objects.prefetch_related('items').get(pk=order_id)
    except Order.DoesNotExist:
        raise NotFound('Order not found')


def count_new_orders():
    return Order.objects.filter(status=Order.Status.NEW).count()
