"""
Management command to check the stored counters against their source rows:

- Customer.total_purchases vs. the sum of the customer's sales
- PoultryBatch.current_count vs. initial_count minus recorded mortality

Reports every mismatch. With --fix the stored values are rewritten.

Run with: python manage.py reconcile_ledgers [--fix]
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from flock_management.models import PoultryBatch
from flock_management.services import live_count_drift
from sales_revenue.models import Customer
from sales_revenue.services import purchases_drift


class Command(BaseCommand):
    help = 'Recompute customer purchase totals and batch live counts and report drift'

    def add_arguments(self, parser):
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Rewrite drifted values from the source rows',
        )

    def handle(self, *args, **options):
        fix = options['fix']

        if not fix:
            self.stdout.write(self.style.WARNING('Report only - run with --fix to correct drift'))

        customer_drift = purchases_drift()
        for customer, stored, expected in customer_drift:
            self.stdout.write(
                f"Customer: {customer.name} (ID: {customer.id})\n"
                f"  Purchases: {stored} -> {expected}"
            )

        batch_drift = live_count_drift()
        for batch, stored, expected in batch_drift:
            self.stdout.write(
                f"Batch: {batch.batch_name} (ID: {batch.id})\n"
                f"  Live birds: {stored} -> {expected}"
            )

        if fix and (customer_drift or batch_drift):
            with transaction.atomic():
                for customer, _, expected in customer_drift:
                    Customer.objects.filter(pk=customer.pk).update(total_purchases=expected)
                for batch, _, expected in batch_drift:
                    PoultryBatch.objects.filter(pk=batch.pk).update(current_count=expected)

        summary = f"{len(customer_drift)} customer(s) and {len(batch_drift)} batch(es) drifted"
        if not customer_drift and not batch_drift:
            self.stdout.write(self.style.SUCCESS('All ledgers consistent'))
        elif fix:
            self.stdout.write(self.style.SUCCESS(f'{summary}, fixed'))
        else:
            self.stdout.write(self.style.WARNING(summary))
