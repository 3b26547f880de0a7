"""
Public order tests.

Covers server-side pricing and price snapshots, order-number generation and
collision retry, the status lifecycle, and the post-commit notification.

Run with: pytest tests/integration/test_orders.py -v
"""

from decimal import Decimal
import re
from unittest.mock import patch

import pytest
from django.core import mail
from django.test import override_settings
from django.utils import timezone
from rest_framework import status

from cms import services as cms_services
from core.exceptions import InvalidStatusTransition, NotFound, ValidationFailed
from sales_revenue import order_services
from sales_revenue.order_models import Order, OrderItem, generate_order_number, to_base36
from sales_revenue.order_services import OrderNumberCollision
from sales_revenue.tasks import send_order_notification

ORDER_NUMBER_PATTERN = re.compile(r'^CFM-[A-Z0-9]+-[A-Z0-9]{4}$')

TEST_PHONE = '+256772123456'


def place(items=None, **overrides):
    fields = {
        'customer_name': 'Okello John',
        'customer_phone': TEST_PHONE,
        'items': items or [{'product': 'eggs_tray', 'quantity': 2}],
    }
    fields.update(overrides)
    return order_services.place_order(**fields)


# =============================================================================
# ORDER NUMBERS
# =============================================================================

class TestOrderNumberFormat:

    def test_matches_prefix_time_random_pattern(self):
        number = generate_order_number()
        assert ORDER_NUMBER_PATTERN.match(number)

    def test_middle_part_is_current_time_in_base36(self):
        before = int(timezone.now().timestamp() * 1000)
        number = generate_order_number()
        after = int(timezone.now().timestamp() * 1000)

        encoded = number.split('-')[1]
        assert before <= int(encoded, 36) <= after

    def test_base36(self):
        assert to_base36(0) == '0'
        assert to_base36(35) == 'Z'
        assert to_base36(36) == '10'

    @override_settings(ORDER_NUMBER_PREFIX='FARM')
    def test_prefix_comes_from_settings(self):
        assert generate_order_number().startswith('FARM-')


@pytest.mark.django_db
class TestOrderNumberCollisions:

    def test_collision_is_retried_with_a_new_number(self):
        existing = place()

        with patch(
            'sales_revenue.order_services.generate_order_number',
            side_effect=[existing.order_number, 'CFM-RETRY1-ABCD'],
        ) as generator:
            order = place()

        assert generator.call_count == 2
        assert order.order_number == 'CFM-RETRY1-ABCD'
        assert Order.objects.count() == 2

    def test_exhausted_attempts_raise_conflict(self):
        existing = place()

        with patch(
            'sales_revenue.order_services.generate_order_number',
            return_value=existing.order_number,
        ) as generator:
            with pytest.raises(OrderNumberCollision):
                place()

        assert generator.call_count == 5
        assert Order.objects.count() == 1
        assert OrderItem.objects.count() == 1

    def test_exhausted_attempts_are_409_over_api(self, api_client, order_payload):
        existing = place()

        with patch(
            'sales_revenue.order_services.generate_order_number',
            return_value=existing.order_number,
        ):
            response = api_client.post('/api/orders/', order_payload, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'order_number_collision'

    def test_bulk_placement_yields_unique_numbers(self):
        """Every tenth generated number repeats the previous one; all stored numbers stay unique."""
        issued = []

        def flaky_generator():
            if issued and len(issued) % 10 == 0:
                issued.append(issued[-1])
            else:
                issued.append(generate_order_number())
            return issued[-1]

        with patch('sales_revenue.order_services.generate_order_number', side_effect=flaky_generator):
            for _ in range(1000):
                place()

        numbers = list(Order.objects.values_list('order_number', flat=True))
        assert len(numbers) == 1000
        assert len(set(numbers)) == 1000
        assert all(ORDER_NUMBER_PATTERN.match(number) for number in numbers)


# =============================================================================
# PLACING ORDERS
# =============================================================================

@pytest.mark.django_db
class TestPlaceOrder:

    def test_total_is_sum_of_priced_items(self):
        order = place(items=[
            {'product': 'eggs_tray', 'quantity': 2},
            {'product': 'manure_bag', 'quantity': 3},
        ])

        assert order.total_amount == Decimal('45000')
        assert order.status == Order.Status.NEW
        lines = {item.product: item for item in order.items.all()}
        assert lines['eggs_tray'].unit_price == Decimal('15000')
        assert lines['eggs_tray'].line_total == Decimal('30000')
        assert lines['manure_bag'].product_name == 'Chicken Manure (50kg bag)'
        assert order.total_amount == sum(item.line_total for item in order.items.all())

    def test_price_setting_overrides_catalogue(self):
        cms_services.bulk_upsert_settings({'order_price_eggs_tray': '16,500'})

        order = place()

        assert order.items.get().unit_price == Decimal('16500')
        assert order.total_amount == Decimal('33000')

    def test_sub_cent_price_setting_is_rounded_before_totalling(self):
        """A price saved with extra decimals is rounded to cents; the total matches the stored lines."""
        cms_services.bulk_upsert_settings({'order_price_eggs_tray': '15000.555'})

        order = place()
        order.refresh_from_db()
        line = order.items.get()

        assert line.unit_price == Decimal('15000.56')
        assert order.total_amount == Decimal('30001.12')
        assert order.total_amount == sum(item.quantity * item.unit_price for item in order.items.all())

    def test_get_order_price_rounds_half_up(self):
        cms_services.bulk_upsert_settings({'order_price_manure_bag': '4999.995'})
        assert cms_services.get_order_price('manure_bag') == Decimal('5000.00')

    def test_invalid_price_setting_falls_back_to_catalogue(self):
        cms_services.bulk_upsert_settings({'order_price_eggs_tray': 'ask us'})
        assert place().total_amount == Decimal('30000')

    def test_price_change_does_not_touch_placed_orders(self):
        order = place()

        cms_services.bulk_upsert_settings({'order_price_eggs_tray': '20000'})
        newer = place()

        order.refresh_from_db()
        assert order.total_amount == Decimal('30000')
        assert order.items.get().unit_price == Decimal('15000')
        assert newer.total_amount == Decimal('40000')

    @pytest.mark.parametrize('items', [
        [],
        [{'product': 'ostrich', 'quantity': 1}],
        [{'product': 'eggs_tray', 'quantity': 0}],
        [{'product': 'eggs_tray'}],
    ])
    def test_bad_items_are_rejected(self, items):
        with pytest.raises(ValidationFailed):
            order_services.place_order(customer_name='A', customer_phone=TEST_PHONE, items=items)
        assert Order.objects.count() == 0

    def test_name_and_phone_required(self):
        with pytest.raises(ValidationFailed) as exc_info:
            order_services.place_order(
                customer_name='', customer_phone='', items=[{'product': 'eggs_tray', 'quantity': 1}]
            )
        assert set(exc_info.value.details) == {'customer_name', 'customer_phone'}


@pytest.mark.django_db
class TestPlaceOrderAPI:

    def test_public_checkout(self, api_client, order_payload):
        """Anonymous visitors can order; client prices are ignored."""
        order_payload['items'] = [{'product': 'eggs_tray', 'quantity': 2, 'unit_price': 1}]
        order_payload['total_amount'] = 2

        response = api_client.post('/api/orders/', order_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert ORDER_NUMBER_PATTERN.match(response.data['order_number'])
        assert Decimal(response.data['order']['total_amount']) == Decimal('30000')
        assert response.data['order']['status'] == 'new'
        assert response.data['order']['items'][0]['product_name'] == 'Fresh Eggs (Tray of 30)'

    def test_checkout_ignores_bad_bearer_token(self, api_client, order_payload):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        response = api_client.post('/api/orders/', order_payload, format='json')
        assert response.status_code == status.HTTP_201_CREATED

    def test_unknown_product_is_400(self, api_client, order_payload):
        order_payload['items'] = [{'product': 'goat', 'quantity': 1}]
        response = api_client.post('/api/orders/', order_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'validation_error'

    def test_listing_requires_employee(self, api_client, order_payload):
        api_client.post('/api/orders/', order_payload, format='json')

        response = api_client.get('/api/orders/')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list_filter_and_new_count(self, employee_client):
        first = place()
        place()
        order_services.update_order_status(first.id, 'confirmed')

        all_orders = employee_client.get('/api/orders/')
        new_orders = employee_client.get('/api/orders/', {'status': 'new'})
        count = employee_client.get('/api/orders/count/new/')

        assert all_orders.data['count'] == 2
        assert new_orders.data['count'] == 1
        assert count.data == {'count': 1}


# =============================================================================
# LIFECYCLE
# =============================================================================

@pytest.mark.django_db
class TestOrderLifecycle:

    def test_forward_path_stamps_timestamps(self):
        order = place()

        order = order_services.update_order_status(order.id, 'confirmed')
        assert order.confirmed_at is not None
        order = order_services.update_order_status(order.id, 'processing')
        order = order_services.update_order_status(order.id, 'delivered')

        assert order.status == Order.Status.DELIVERED
        assert order.delivered_at is not None
        assert order.cancelled_at is None

    def test_cancelled_cannot_be_reopened(self):
        order = place()
        order_services.update_order_status(order.id, 'cancelled')

        with pytest.raises(InvalidStatusTransition) as exc_info:
            order_services.update_order_status(order.id, 'confirmed')

        assert exc_info.value.details['current_status'] == 'cancelled'
        order.refresh_from_db()
        assert order.status == Order.Status.CANCELLED
        assert order.cancelled_at is not None

    @pytest.mark.parametrize('path,target', [
        ([], 'delivered'),
        ([], 'processing'),
        (['confirmed'], 'new'),
        (['confirmed', 'processing', 'delivered'], 'cancelled'),
        (['confirmed', 'processing', 'delivered'], 'new'),
    ])
    def test_disallowed_edges(self, path, target):
        order = place()
        for step in path:
            order_services.update_order_status(order.id, step)

        with pytest.raises(InvalidStatusTransition):
            order_services.update_order_status(order.id, target)

    @pytest.mark.parametrize('path', [[], ['confirmed'], ['confirmed', 'processing']])
    def test_cancel_from_any_open_state(self, path):
        order = place()
        for step in path:
            order_services.update_order_status(order.id, step)

        order = order_services.update_order_status(order.id, 'cancelled')
        assert order.status == Order.Status.CANCELLED

    def test_same_status_is_a_noop(self):
        order = place()
        order = order_services.update_order_status(order.id, 'confirmed')
        stamped = order.confirmed_at

        order = order_services.update_order_status(order.id, 'confirmed')
        assert order.confirmed_at == stamped

    def test_unknown_status_is_validation_error(self):
        order = place()
        with pytest.raises(ValidationFailed):
            order_services.update_order_status(order.id, 'shipped')

    def test_missing_order_is_not_found(self, db):
        import uuid

        with pytest.raises(NotFound):
            order_services.update_order_status(uuid.uuid4(), 'confirmed')

    def test_status_endpoint(self, employee_client):
        order = place()

        ok = employee_client.put(f'/api/orders/{order.id}/status/', {'status': 'cancelled'}, format='json')
        rejected = employee_client.patch(f'/api/orders/{order.id}/status/', {'status': 'confirmed'}, format='json')
        invalid = employee_client.put(f'/api/orders/{order.id}/status/', {'status': 'lost'}, format='json')

        assert ok.status_code == status.HTTP_200_OK
        assert ok.data['status'] == 'cancelled'
        assert rejected.status_code == status.HTTP_409_CONFLICT
        assert rejected.data['code'] == 'invalid_status_transition'
        assert invalid.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_is_idempotent(self, employee_client):
        order = place()

        first = employee_client.delete(f'/api/orders/{order.id}/')
        second = employee_client.delete(f'/api/orders/{order.id}/')

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_200_OK
        assert not Order.objects.filter(pk=order.id).exists()
        assert OrderItem.objects.count() == 0

    def test_get_missing_order_is_404(self, employee_client):
        response = employee_client.get('/api/orders/7d1f1c4e-0000-4000-8000-000000000000/')
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'error': 'Order not found', 'code': 'not_found'}


# =============================================================================
# NOTIFICATION
# =============================================================================

@pytest.mark.django_db
class TestOrderNotification:

    def test_notification_queued_after_commit(self, api_client, order_payload, django_capture_on_commit_callbacks):
        with patch('sales_revenue.tasks.send_order_notification.delay') as delay:
            with django_capture_on_commit_callbacks(execute=True) as callbacks:
                response = api_client.post('/api/orders/', order_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert len(callbacks) == 1
        delay.assert_called_once_with(response.data['order']['id'])

    def test_notification_not_queued_when_order_fails(self, django_capture_on_commit_callbacks):
        with patch('sales_revenue.tasks.send_order_notification.delay') as delay:
            with django_capture_on_commit_callbacks(execute=True) as callbacks:
                with pytest.raises(ValidationFailed):
                    order_services.place_order(customer_name='A', customer_phone=TEST_PHONE, items=[])

        assert callbacks == []
        delay.assert_not_called()

    def test_broker_failure_does_not_fail_order(self, api_client, order_payload, django_capture_on_commit_callbacks):
        with patch('sales_revenue.tasks.send_order_notification.delay', side_effect=ConnectionError('broker down')):
            with django_capture_on_commit_callbacks(execute=True):
                response = api_client.post('/api/orders/', order_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Order.objects.filter(order_number=response.data['order_number']).exists()

    def test_task_emails_farm_office(self):
        order = place(notes='Please deliver before noon', customer_email='okello@example.com')

        send_order_notification(str(order.id))

        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.to == ['info@countryfarm.ug']
        assert order.order_number in message.subject
        assert 'UGX 30,000' in message.body
        assert 'Please deliver before noon' in message.body
        html, mimetype = message.alternatives[0]
        assert mimetype == 'text/html'
        assert order.order_number in html

    def test_task_uses_email_setting(self):
        cms_services.bulk_upsert_settings({'email': 'orders@countryfarm.ug'})
        order = place()

        send_order_notification(str(order.id))

        assert mail.outbox[0].to == ['orders@countryfarm.ug']

    def test_task_skips_missing_order(self, db):
        result = send_order_notification('7d1f1c4e-0000-4000-8000-000000000000')
        assert 'not found' in result
        assert mail.outbox == []
