"""
Customer purchase ledger tests.

Customer.total_purchases must always equal the sum of the customer's
recorded sales, across record/delete sequences, rejected input and
injected storage failures.

Run with: pytest tests/integration/test_sales_ledger.py -v
"""

from decimal import Decimal
import random
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.db.models import Sum
from rest_framework import status

from core.exceptions import Conflict, NotFound, ValidationFailed
from sales_revenue import services
from sales_revenue.models import Customer, Sale


def _sum_of_sales(customer):
    return Sale.objects.filter(customer=customer).aggregate(total=Sum('total_amount'))['total'] or Decimal('0.00')


# =============================================================================
# SERVICE LAYER
# =============================================================================

@pytest.mark.django_db
class TestRecordAndDeleteSale:

    def test_record_then_delete_moves_total_purchases(self, customer):
        """Sale of 10 x 1000 adds 10000; deleting it brings the ledger back to 0."""
        assert customer.total_purchases == Decimal('0.00')

        sale = services.record_sale(
            customer_id=customer.id, sale_type='eggs', quantity=10, unit_price=1000
        )
        assert sale.total_amount == Decimal('10000.00')
        customer.refresh_from_db()
        assert customer.total_purchases == Decimal('10000.00')

        assert services.delete_sale(sale.id) is True
        customer.refresh_from_db()
        assert customer.total_purchases == Decimal('0.00')

    def test_total_amount_is_always_quantity_times_price(self, customer):
        sale = services.record_sale(
            customer_id=customer.id, sale_type='birds', quantity=3, unit_price='25000.50'
        )
        sale.refresh_from_db()
        assert sale.total_amount == sale.quantity * sale.unit_price == Decimal('75001.50')

    @pytest.mark.parametrize('quantity,unit_price,field', [
        (10, 0, 'unit_price'),
        (0, 1000, 'quantity'),
        (10, -5, 'unit_price'),
        (3, Decimal('0.005'), 'unit_price'),
        (2, '1500.125', 'unit_price'),
    ])
    def test_rejected_sale_writes_nothing(self, customer, quantity, unit_price, field):
        """Zero or negative input is a validation error with no sale and no ledger change."""
        with pytest.raises(ValidationFailed) as exc_info:
            services.record_sale(
                customer_id=customer.id, sale_type='eggs', quantity=quantity, unit_price=unit_price
            )

        assert field in exc_info.value.details
        assert Sale.objects.count() == 0
        customer.refresh_from_db()
        assert customer.total_purchases == Decimal('0.00')

    def test_trailing_zero_decimals_are_whole_cents(self, customer):
        """1500.500 is a cent-precise price; stored row and ledger agree with the returned sale."""
        sale = services.record_sale(
            customer_id=customer.id, sale_type='eggs', quantity=3, unit_price='1500.500'
        )
        sale.refresh_from_db()
        customer.refresh_from_db()

        assert sale.unit_price == Decimal('1500.50')
        assert sale.total_amount == sale.quantity * sale.unit_price == Decimal('4501.50')
        assert customer.total_purchases == sale.total_amount

    def test_unknown_customer_is_not_found(self, db):
        import uuid

        with pytest.raises(NotFound):
            services.record_sale(
                customer_id=uuid.uuid4(), sale_type='eggs', quantity=1, unit_price=1000
            )
        assert Sale.objects.count() == 0

    def test_delete_absent_sale_is_idempotent(self, customer):
        sale = services.record_sale(
            customer_id=customer.id, sale_type='eggs', quantity=2, unit_price=500
        )
        assert services.delete_sale(sale.id) is True
        assert services.delete_sale(sale.id) is False

        customer.refresh_from_db()
        assert customer.total_purchases == Decimal('0.00')

    def test_update_sale_only_touches_payment_fields(self, customer):
        sale = services.record_sale(
            customer_id=customer.id, sale_type='eggs', quantity=4, unit_price=15000
        )

        updated = services.update_sale(sale.id, payment_status='paid', payment_method='Mobile Money')
        assert updated.payment_status == 'paid'
        assert updated.total_amount == Decimal('60000.00')

        with pytest.raises(ValidationFailed):
            services.update_sale(sale.id, quantity=100)

        customer.refresh_from_db()
        assert customer.total_purchases == Decimal('60000.00')

    def test_random_interleaving_preserves_ledger(self, customer, employee_user):
        """Any mix of record/delete keeps total_purchases equal to the sum of live sales."""
        from sales_revenue.models import Customer as CustomerModel

        other = CustomerModel.objects.create(name='Other Buyer', phone='+256701000001')
        rng = random.Random(20240518)
        live = []

        for _ in range(60):
            if live and rng.random() < 0.35:
                sale = live.pop(rng.randrange(len(live)))
                services.delete_sale(sale.id)
            else:
                target = rng.choice([customer, other])
                sale = services.record_sale(
                    customer_id=target.id,
                    sale_type=rng.choice(['eggs', 'birds', 'manure', 'other']),
                    quantity=rng.randint(1, 40),
                    unit_price=Decimal(rng.randint(1, 500000)) / 100,
                    recorded_by=employee_user,
                )
                live.append(sale)

            for target in (customer, other):
                target.refresh_from_db()
                assert target.total_purchases == _sum_of_sales(target)


@pytest.mark.django_db
class TestLedgerAtomicity:
    """A failing counter update must roll back the row write it belongs to."""

    def test_record_sale_rolls_back_when_counter_update_fails(self, customer):
        with patch('sales_revenue.services.adjust_total_purchases', side_effect=DatabaseError('disk full')):
            with pytest.raises(DatabaseError):
                services.record_sale(
                    customer_id=customer.id, sale_type='eggs', quantity=10, unit_price=1000
                )

        assert Sale.objects.count() == 0
        customer.refresh_from_db()
        assert customer.total_purchases == Decimal('0.00')

    def test_delete_sale_rolls_back_when_counter_update_fails(self, customer):
        sale = services.record_sale(
            customer_id=customer.id, sale_type='eggs', quantity=10, unit_price=1000
        )

        with patch('sales_revenue.services.adjust_total_purchases', side_effect=DatabaseError('disk full')):
            with pytest.raises(DatabaseError):
                services.delete_sale(sale.id)

        assert Sale.objects.filter(pk=sale.id).exists()
        customer.refresh_from_db()
        assert customer.total_purchases == Decimal('10000.00')


@pytest.mark.django_db
class TestCustomerServices:

    def test_duplicate_email_is_conflict(self, customer):
        with pytest.raises(Conflict):
            services.create_customer(name='Copy', phone='+256701000002', email='NAKATO@example.com')

    def test_blank_emails_do_not_collide(self, db):
        services.create_customer(name='First', phone='+256701000003')
        services.create_customer(name='Second', phone='+256701000004')
        assert Customer.objects.filter(email='').count() == 2

    def test_total_purchases_cannot_be_set(self, customer):
        with pytest.raises(ValidationFailed):
            services.update_customer(customer.id, total_purchases=Decimal('999'))

    def test_customer_with_sales_cannot_be_deleted(self, customer):
        services.record_sale(customer_id=customer.id, sale_type='eggs', quantity=1, unit_price=1000)

        with pytest.raises(Conflict):
            services.delete_customer(customer.id)
        assert Customer.objects.filter(pk=customer.id).exists()

    def test_delete_customer_is_idempotent(self, customer):
        assert services.delete_customer(customer.id) is True
        assert services.delete_customer(customer.id) is False


# =============================================================================
# API
# =============================================================================

@pytest.mark.django_db
class TestSalesAPI:

    def test_create_sale_returns_computed_total(self, employee_client, customer):
        response = employee_client.post('/api/sales/', {
            'customer_id': str(customer.id),
            'sale_type': 'eggs',
            'quantity': 10,
            'unit_price': '1000.00',
            'total_amount': '1.00',
            'payment_method': 'Cash',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Decimal(response.data['total_amount']) == Decimal('10000.00')
        customer.refresh_from_db()
        assert customer.total_purchases == Decimal('10000.00')

    def test_zero_quantity_is_400(self, employee_client, customer):
        response = employee_client.post('/api/sales/', {
            'customer_id': str(customer.id),
            'sale_type': 'eggs',
            'quantity': 0,
            'unit_price': '1000.00',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'validation_error'
        assert 'quantity' in response.data['details']
        assert Sale.objects.count() == 0

    def test_sale_for_missing_customer_is_404(self, employee_client, db):
        response = employee_client.post('/api/sales/', {
            'customer_id': '7d1f1c4e-0000-4000-8000-000000000000',
            'sale_type': 'eggs',
            'quantity': 1,
            'unit_price': '1000.00',
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'error': 'Customer not found', 'code': 'not_found'}

    def test_delete_sale_twice_succeeds(self, employee_client, customer):
        sale = services.record_sale(customer_id=customer.id, sale_type='eggs', quantity=2, unit_price=100)

        first = employee_client.delete(f'/api/sales/{sale.id}/')
        second = employee_client.delete(f'/api/sales/{sale.id}/')

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_200_OK
        customer.refresh_from_db()
        assert customer.total_purchases == Decimal('0.00')

    def test_update_sale_rejects_amount_changes(self, employee_client, customer):
        sale = services.record_sale(customer_id=customer.id, sale_type='eggs', quantity=2, unit_price=100)

        response = employee_client.put(f'/api/sales/{sale.id}/', {'unit_price': '5.00'}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = employee_client.put(f'/api/sales/{sale.id}/', {'payment_status': 'paid'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['payment_status'] == 'paid'

    def test_storage_failure_is_generic_500(self, employee_client, customer):
        with patch('sales_revenue.services.adjust_total_purchases', side_effect=DatabaseError('secret detail')):
            response = employee_client.post('/api/sales/', {
                'customer_id': str(customer.id),
                'sale_type': 'eggs',
                'quantity': 1,
                'unit_price': '1000.00',
            }, format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['code'] == 'persistence_error'
        assert 'secret detail' not in str(response.data)
        assert Sale.objects.count() == 0

    def test_list_is_paginated(self, employee_client, customer):
        for _ in range(3):
            services.record_sale(customer_id=customer.id, sale_type='eggs', quantity=1, unit_price=100)

        response = employee_client.get('/api/sales/', {'customer': str(customer.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 3
        assert response.data['current_page'] == 1
        assert len(response.data['results']) == 3

    def test_summary(self, employee_client, customer):
        services.record_sale(customer_id=customer.id, sale_type='eggs', quantity=2, unit_price=1000)
        services.record_sale(
            customer_id=customer.id, sale_type='birds', quantity=1, unit_price=5000, payment_status='paid'
        )

        response = employee_client.get('/api/sales/stats/summary/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total'] == Decimal('7000.00')
        assert response.data['today'] == Decimal('7000.00')
        assert response.data['pending_payments'] == Decimal('2000.00')
        assert {row['sale_type'] for row in response.data['by_type']} == {'eggs', 'birds'}


@pytest.mark.django_db
class TestCustomersAPI:

    def test_create_and_list(self, employee_client):
        response = employee_client.post('/api/customers/', {
            'name': 'Mukasa Peter',
            'phone': '0772123457',
            'email': 'mukasa@example.com',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['phone'] == '+256772123457'
        assert Decimal(response.data['total_purchases']) == Decimal('0.00')

        listing = employee_client.get('/api/customers/', {'search': 'Mukasa'})
        assert listing.data['count'] == 1

    def test_duplicate_email_is_409(self, employee_client, customer):
        response = employee_client.post('/api/customers/', {
            'name': 'Someone Else',
            'phone': '+256772123458',
            'email': customer.email,
        }, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'conflict'

    def test_invalid_phone_is_400(self, employee_client):
        response = employee_client.post('/api/customers/', {'name': 'Bad Phone', 'phone': '12'}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'phone' in response.data['details']

    def test_delete_with_sales_is_409(self, employee_client, customer):
        services.record_sale(customer_id=customer.id, sale_type='eggs', quantity=1, unit_price=1000)

        response = employee_client.delete(f'/api/customers/{customer.id}/')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert Customer.objects.filter(pk=customer.id).exists()

    def test_customer_role_is_forbidden(self, api_client, customer_user):
        api_client.force_authenticate(user=customer_user)
        response = api_client.get('/api/customers/')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_anonymous_is_401(self, api_client, db):
        response = api_client.get('/api/customers/')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['code'] == 'not_authenticated'
