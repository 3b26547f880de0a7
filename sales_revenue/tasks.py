"""
Sales & Revenue Celery tasks.

Order notification emails to the farm office.
"""
from decimal import Decimal
import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


def format_currency(amount):
    """Whole-shilling amounts with thousands separators, e.g. 'UGX 170,000'."""
    value = Decimal(amount or 0).quantize(Decimal('1'))
    return f"{settings.FARM_CURRENCY} {value:,}"


def build_order_email(order):
    """Returns (subject, text_content, html_content) for an order."""
    items = [
        {
            'product_name': item.product_name,
            'quantity': item.quantity,
            'unit': item.unit,
            'unit_price_display': format_currency(item.unit_price),
            'line_total_display': format_currency(item.line_total),
        }
        for item in order.items.all()
    ]
    total_display = format_currency(order.total_amount)

    subject = f"New Order #{order.order_number} from {order.customer_name}"

    lines = [
        f"New order received: {order.order_number}",
        '',
        f"Customer: {order.customer_name}",
        f"Phone: {order.customer_phone}",
    ]
    if order.customer_email:
        lines.append(f"Email: {order.customer_email}")
    if order.delivery_address:
        lines.append(f"Delivery Address: {order.delivery_address}")
    lines.append('')
    lines.append('Items:')
    for item in items:
        lines.append(
            f"  - {item['product_name']}: {item['quantity']} {item['unit']} "
            f"x {item['unit_price_display']} = {item['line_total_display']}"
        )
    lines.append('')
    lines.append(f"Total Amount: {total_display}")
    if order.notes:
        lines.append('')
        lines.append(f"Customer Notes: {order.notes}")
    lines.append('')
    lines.append('Please log in to the dashboard to manage this order.')
    text_content = '\n'.join(lines)

    html_content = render_to_string('sales_revenue/emails/new_order.html', {
        'farm_name': settings.FARM_NAME,
        'order': order,
        'items': items,
        'total_display': total_display,
    })
    return subject, text_content, html_content


@shared_task(bind=True, max_retries=3)
def send_order_notification(self, order_id):
    """
    Email the farm office about a newly placed order.

    Args:
        order_id: UUID of the Order
    """
    from cms.services import get_setting
    from .order_models import Order

    try:
        order = Order.objects.prefetch_related('items').get(id=order_id)
    except Order.DoesNotExist:
        logger.warning(f"Order {order_id} not found, skipping notification")
        return f"Order {order_id} not found"

    recipient = get_setting('email', settings.ORDER_NOTIFICATION_EMAIL)

    try:
        subject, text_content, html_content = build_order_email(order)
        email = EmailMultiAlternatives(
            subject=subject,
            body=text_content,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[recipient],
        )
        email.attach_alternative(html_content, "text/html")
        email.send(fail_silently=False)
    except Exception as exc:
        logger.error(f"Failed to send notification for order {order.order_number}: {exc}", exc_info=True)
        raise self.retry(exc=exc, countdown=60)

    logger.info(f"Order notification for {order.order_number} sent to {recipient}")
    return f"Notification sent to {recipient}"
