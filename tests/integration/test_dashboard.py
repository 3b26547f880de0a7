"""
Dashboard aggregate tests.

Run with: pytest tests/integration/test_dashboard.py -v
"""

import datetime
from decimal import Decimal

import pytest
from rest_framework import status

from dashboards.services import FarmDashboardService
from expenses.services import record_expense
from flock_management import services as flock
from flock_management.models import PoultryBatch
from sales_revenue.order_models import Order
from sales_revenue.order_services import place_order, update_order_status
from sales_revenue.services import record_sale, sales_summary

TODAY = datetime.date(2024, 6, 15)


@pytest.fixture
def farm_activity(batch, customer):
    """A week of records around TODAY."""
    flock.record_egg_production(batch_id=batch.id, eggs_collected=400, broken_eggs=5, date=TODAY)
    flock.record_egg_production(batch_id=batch.id, eggs_collected=380, broken_eggs=3,
                                date=datetime.date(2024, 6, 10))
    flock.record_egg_production(batch_id=batch.id, eggs_collected=350, broken_eggs=2,
                                date=datetime.date(2024, 5, 20))

    flock.record_health_event(batch_id=batch.id, record_type='mortality', description='Heat',
                              mortality_count=4, date=datetime.date(2024, 6, 12))
    flock.record_feed(batch_id=batch.id, feed_type='Layers Mash', quantity_kg='100', cost='190000',
                      date=datetime.date(2024, 6, 3))

    record_sale(customer_id=customer.id, sale_type='eggs', quantity=10, unit_price='15000',
                payment_status='paid', sale_date=TODAY)
    record_sale(customer_id=customer.id, sale_type='birds', quantity=2, unit_price='25000',
                sale_date=datetime.date(2024, 6, 5))
    record_sale(customer_id=customer.id, sale_type='manure', quantity=4, unit_price='5000',
                payment_status='paid', sale_date=datetime.date(2024, 5, 28))

    record_expense(category='feed', description='Mash', amount='190000', date=datetime.date(2024, 6, 3))
    record_expense(category='labor', description='May wages', amount='300000', date=datetime.date(2024, 5, 31))


@pytest.mark.django_db
class TestOverviewStats:

    def test_overview(self, farm_activity, order_payload):
        placed = place_order(**order_payload)
        update_order_status(placed.id, Order.Status.CONFIRMED)
        place_order(**order_payload)

        stats = FarmDashboardService(today=TODAY).get_overview_stats()

        assert stats['poultry'] == {'total_birds': 496, 'active_batches': 1, 'recent_mortality': 4}
        assert stats['eggs'] == {'weekly_production': 780, 'weekly_broken': 8, 'today_production': 400}
        assert stats['sales']['total_revenue'] == 220000.0
        assert stats['sales']['month_revenue'] == 200000.0
        assert stats['sales']['pending_payments'] == 50000.0
        assert stats['expenses'] == {'total_expenses': 490000.0, 'month_expenses': 190000.0}
        assert stats['customers']['total'] == 1
        assert stats['feed'] == {'month_usage_kg': 100.0, 'month_cost': 190000.0}
        assert stats['orders']['total'] == 2
        assert stats['orders']['new_orders'] == 1
        assert stats['orders']['revenue'] == 30000.0
        assert stats['profit'] == {'monthly': 10000.0, 'total': -270000.0}

    def test_future_dated_records_are_outside_this_month(self, batch, customer):
        """A sale, expense and feed record dated next month do not count towards the current month."""
        record_sale(customer_id=customer.id, sale_type='eggs', quantity=1, unit_price='100',
                    sale_date=datetime.date(2024, 6, 10))
        record_sale(customer_id=customer.id, sale_type='eggs', quantity=1, unit_price='900',
                    sale_date=datetime.date(2024, 7, 2))
        record_expense(category='feed', description='Prepaid mash', amount='400',
                       date=datetime.date(2024, 7, 1))
        flock.record_feed(batch_id=batch.id, feed_type='Layers Mash', quantity_kg='20', cost='400',
                          date=datetime.date(2024, 7, 1))
        flock.record_egg_production(batch_id=batch.id, eggs_collected=300,
                                    date=datetime.date(2024, 6, 16))

        stats = FarmDashboardService(today=TODAY).get_overview_stats()

        assert stats['sales']['month_revenue'] == 100.0
        assert stats['sales']['month_revenue'] == float(sales_summary(today=TODAY)['month'])
        assert stats['sales']['total_revenue'] == 1000.0
        assert stats['expenses']['month_expenses'] == 0.0
        assert stats['feed'] == {'month_usage_kg': 0.0, 'month_cost': 0.0}
        assert stats['eggs']['weekly_production'] == 0
        assert stats['profit']['monthly'] == 100.0
        # The customer row was created after TODAY
        assert stats['customers'] == {'total': 1, 'new_this_month': 0}

    def test_charts_stop_at_today(self, batch, customer):
        record_sale(customer_id=customer.id, sale_type='eggs', quantity=1, unit_price='900',
                    sale_date=datetime.date(2024, 6, 20))
        flock.record_egg_production(batch_id=batch.id, eggs_collected=300,
                                    date=datetime.date(2024, 6, 20))

        service = FarmDashboardService(today=TODAY)

        assert service.get_sales_chart(days=30) == []
        assert service.get_egg_chart(days=30) == []

    def test_inactive_batches_are_not_counted(self, batch):
        flock.update_batch(batch.id, status=PoultryBatch.Status.SOLD)

        stats = FarmDashboardService(today=TODAY).get_overview_stats()

        assert stats['poultry']['total_birds'] == 0
        assert stats['poultry']['active_batches'] == 0

    def test_empty_farm(self, db):
        stats = FarmDashboardService(today=TODAY).get_overview_stats()

        assert stats['poultry']['total_birds'] == 0
        assert stats['sales']['total_revenue'] == 0.0
        assert stats['profit']['total'] == 0.0


@pytest.mark.django_db
class TestActivityAndCharts:

    def test_recent_activity_is_newest_first(self, farm_activity):
        activities = FarmDashboardService(today=TODAY).get_recent_activity(limit=5)

        assert len(activities) == 5
        created = [a['created_at'] for a in activities]
        assert created == sorted(created, reverse=True)
        assert {a['type'] for a in activities} <= {'egg', 'sale', 'health'}

    def test_egg_chart(self, farm_activity):
        chart = FarmDashboardService(today=TODAY).get_egg_chart(days=7)

        assert chart == [
            {'date': '2024-06-10', 'eggs': 380, 'broken': 3},
            {'date': '2024-06-15', 'eggs': 400, 'broken': 5},
        ]

    def test_sales_chart(self, farm_activity):
        chart = FarmDashboardService(today=TODAY).get_sales_chart(days=30)

        assert chart == [
            {'date': '2024-05-28', 'total': 20000.0},
            {'date': '2024-06-05', 'total': 50000.0},
            {'date': '2024-06-15', 'total': 150000.0},
        ]


@pytest.mark.django_db
class TestDashboardAPI:

    def test_stats_endpoint(self, employee_client, batch):
        response = employee_client.get('/api/dashboard/stats/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['poultry']['total_birds'] == 500

    def test_activity_limit_is_capped(self, employee_client, batch):
        for _ in range(3):
            flock.record_egg_production(batch_id=batch.id, eggs_collected=100)

        limited = employee_client.get('/api/dashboard/activities/', {'limit': 2})
        fallback = employee_client.get('/api/dashboard/activities/', {'limit': 'lots'})

        assert len(limited.data) == 2
        assert len(fallback.data) == 3

    def test_charts_endpoints(self, employee_client, batch, customer):
        flock.record_egg_production(batch_id=batch.id, eggs_collected=120)
        record_sale(customer_id=customer.id, sale_type='eggs', quantity=1, unit_price=Decimal('15000'))

        eggs = employee_client.get('/api/dashboard/charts/eggs/', {'days': 7})
        sales = employee_client.get('/api/dashboard/charts/sales/')

        assert eggs.status_code == status.HTTP_200_OK
        assert eggs.data[0]['eggs'] == 120
        assert sales.data[0]['total'] == 15000.0

    def test_anonymous_is_401(self, api_client):
        response = api_client.get('/api/dashboard/stats/')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
