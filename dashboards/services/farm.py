"""
Farm Dashboard Service

Read-only aggregates for the back-office dashboard:
- Overview stats (poultry, eggs, sales, expenses, customers, feed, orders, profit)
- Recent activity feed
- Daily egg and sales charts

All "today" and "this month" boundaries use the configured TIME_ZONE.
"""

from datetime import datetime, time, timedelta
from decimal import Decimal

from django.conf import settings
from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from expenses.models import Expense
from flock_management.models import EggProductionRecord, FeedRecord, HealthRecord, PoultryBatch
from sales_revenue.models import Customer, Sale
from sales_revenue.order_models import Order

ZERO = Decimal('0.00')

# Orders that count towards order revenue
ORDER_REVENUE_STATUSES = [
    Order.Status.CONFIRMED,
    Order.Status.PROCESSING,
    Order.Status.DELIVERED,
]


class FarmDashboardService:
    """Service for farm dashboard data"""

    def __init__(self, today=None):
        self.today = today or timezone.localdate()
        self.month_start = self.today.replace(day=1)

    def _month_created_window(self):
        """created_at range from the first of the month to the end of today."""
        start = timezone.make_aware(datetime.combine(self.month_start, time.min))
        end = timezone.make_aware(datetime.combine(self.today + timedelta(days=1), time.min))
        return Q(created_at__gte=start, created_at__lt=end)

    def get_overview_stats(self):
        """
        Get overview statistics for the whole farm.

        Every window ends at ``today``; records dated later are not counted.

        Returns:
            dict: Metrics grouped by area
        """
        mortality_since = self.today - timedelta(days=settings.DASHBOARD_MORTALITY_WINDOW_DAYS)
        week = Q(date__gte=self.today - timedelta(days=7), date__lte=self.today)
        month = Q(date__gte=self.month_start, date__lte=self.today)
        sale_month = Q(sale_date__gte=self.month_start, sale_date__lte=self.today)
        created_this_month = self._month_created_window()

        # Poultry statistics
        active_batches = PoultryBatch.objects.filter(status=PoultryBatch.Status.ACTIVE).aggregate(
            birds=Coalesce(Sum('current_count'), 0),
            count=Count('id'),
        )
        recent_mortality = HealthRecord.objects.filter(
            date__gte=mortality_since,
            date__lte=self.today,
            mortality_count__gt=0
        ).aggregate(total=Coalesce(Sum('mortality_count'), 0))['total']

        # Egg production
        eggs = EggProductionRecord.objects.aggregate(
            weekly=Coalesce(Sum('eggs_collected', filter=week), 0),
            weekly_broken=Coalesce(Sum('broken_eggs', filter=week), 0),
            today=Coalesce(Sum('eggs_collected', filter=Q(date=self.today)), 0),
        )

        # Sales and expenses
        sales = Sale.objects.aggregate(
            total=Coalesce(Sum('total_amount'), ZERO),
            month=Coalesce(Sum('total_amount', filter=sale_month), ZERO),
            pending=Coalesce(Sum('total_amount', filter=Q(payment_status=Sale.PaymentStatus.PENDING)), ZERO),
        )
        expenses = Expense.objects.aggregate(
            total=Coalesce(Sum('amount'), ZERO),
            month=Coalesce(Sum('amount', filter=month), ZERO),
        )

        # Customers
        customers = Customer.objects.aggregate(
            total=Count('id'),
            new_this_month=Count('id', filter=created_this_month),
        )

        # Feed usage this month
        feed = FeedRecord.objects.filter(month).aggregate(
            usage=Coalesce(Sum('quantity_kg'), ZERO),
            cost=Coalesce(Sum('cost'), ZERO),
        )

        # Orders
        orders = Order.objects.aggregate(
            total=Count('id'),
            new=Count('id', filter=Q(status=Order.Status.NEW)),
            revenue=Coalesce(Sum('total_amount', filter=Q(status__in=ORDER_REVENUE_STATUSES)), ZERO),
            this_month=Count('id', filter=created_this_month),
        )

        return {
            'poultry': {
                'total_birds': active_batches['birds'],
                'active_batches': active_batches['count'],
                'recent_mortality': recent_mortality,
            },
            'eggs': {
                'weekly_production': eggs['weekly'],
                'weekly_broken': eggs['weekly_broken'],
                'today_production': eggs['today'],
            },
            'sales': {
                'total_revenue': float(sales['total']),
                'month_revenue': float(sales['month']),
                'pending_payments': float(sales['pending']),
            },
            'expenses': {
                'total_expenses': float(expenses['total']),
                'month_expenses': float(expenses['month']),
            },
            'customers': {
                'total': customers['total'],
                'new_this_month': customers['new_this_month'],
            },
            'feed': {
                'month_usage_kg': float(feed['usage']),
                'month_cost': float(feed['cost']),
            },
            'orders': {
                'total': orders['total'],
                'new_orders': orders['new'],
                'revenue': float(orders['revenue']),
                'this_month': orders['this_month'],
            },
            'profit': {
                'monthly': float(sales['month'] - expenses['month']),
                'total': float(sales['total'] - expenses['total']),
            },
        }

    def get_recent_activity(self, limit=20):
        """
        Latest sales, egg collections and health events, newest first.

        Returns:
            list: Up to ``limit`` activity dicts
        """
        activities = []

        for record in EggProductionRecord.objects.select_related('batch').order_by('-created_at')[:limit]:
            activities.append({
                'type': 'egg',
                'id': str(record.id),
                'date': record.date.isoformat(),
                'value': record.eggs_collected,
                'description': f"Eggs collected - {record.batch.batch_name}",
                'created_at': record.created_at,
            })

        for sale in Sale.objects.select_related('customer').order_by('-created_at')[:limit]:
            activities.append({
                'type': 'sale',
                'id': str(sale.id),
                'date': sale.sale_date.isoformat(),
                'value': float(sale.total_amount),
                'description': f"{sale.customer.name} - {sale.sale_type}",
                'created_at': sale.created_at,
            })

        for record in HealthRecord.objects.select_related('batch').order_by('-created_at')[:limit]:
            activities.append({
                'type': 'health',
                'id': str(record.id),
                'date': record.date.isoformat(),
                'value': record.record_type,
                'description': f"{record.batch.batch_name} - {record.description}",
                'created_at': record.created_at,
            })

        activities.sort(key=lambda activity: activity['created_at'], reverse=True)
        activities = activities[:limit]
        for activity in activities:
            activity['created_at'] = activity['created_at'].isoformat()
        return activities

    def get_egg_chart(self, days=30):
        """Per-day eggs collected and broken for the last ``days`` days."""
        since = self.today - timedelta(days=days)
        rows = (
            EggProductionRecord.objects
            .filter(date__gte=since, date__lte=self.today)
            .values('date')
            .annotate(eggs=Sum('eggs_collected'), broken=Sum('broken_eggs'))
            .order_by('date')
        )
        return [
            {'date': row['date'].isoformat(), 'eggs': row['eggs'], 'broken': row['broken']}
            for row in rows
        ]

    def get_sales_chart(self, days=30):
        """Per-day sales totals for the last ``days`` days."""
        since = self.today - timedelta(days=days)
        rows = (
            Sale.objects
            .filter(sale_date__gte=since, sale_date__lte=self.today)
            .values('sale_date')
            .annotate(total=Sum('total_amount'))
            .order_by('sale_date')
        )
        return [
            {'date': row['sale_date'].isoformat(), 'total': float(row['total'])}
            for row in rows
        ]
