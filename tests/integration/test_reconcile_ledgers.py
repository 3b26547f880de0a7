"""
reconcile_ledgers management command tests.

Run with: pytest tests/integration/test_reconcile_ledgers.py -v
"""

from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command

from flock_management.models import PoultryBatch
from flock_management.services import record_health_event
from sales_revenue.models import Customer
from sales_revenue.services import record_sale


def run_reconcile(*args):
    out = StringIO()
    call_command('reconcile_ledgers', *args, stdout=out)
    return out.getvalue()


@pytest.fixture
def drifted(customer, batch):
    record_sale(customer_id=customer.id, sale_type='eggs', quantity=3, unit_price='15000')
    record_health_event(batch_id=batch.id, record_type='mortality', description='Loss', mortality_count=10)

    Customer.objects.filter(pk=customer.pk).update(total_purchases=Decimal('1.00'))
    PoultryBatch.objects.filter(pk=batch.pk).update(current_count=500)
    return customer, batch


@pytest.mark.django_db
class TestReconcileLedgers:

    def test_consistent_ledgers(self, customer, batch):
        record_sale(customer_id=customer.id, sale_type='eggs', quantity=1, unit_price='15000')

        output = run_reconcile()

        assert 'All ledgers consistent' in output

    def test_report_only_leaves_values(self, drifted):
        customer, batch = drifted

        output = run_reconcile()

        assert 'Report only' in output
        assert '1 customer(s) and 1 batch(es) drifted' in output
        assert 'Live birds: 500 -> 490' in output
        customer.refresh_from_db()
        assert customer.total_purchases == Decimal('1.00')

    def test_fix_rewrites_drift(self, drifted):
        customer, batch = drifted

        output = run_reconcile('--fix')

        assert 'fixed' in output
        customer.refresh_from_db()
        batch.refresh_from_db()
        assert customer.total_purchases == Decimal('45000')
        assert batch.current_count == 490
        assert 'All ledgers consistent' in run_reconcile()

    def test_customer_without_sales_expects_zero(self, customer):
        Customer.objects.filter(pk=customer.pk).update(total_purchases=Decimal('500'))

        run_reconcile('--fix')

        customer.refresh_from_db()
        assert customer.total_purchases == Decimal('0')
