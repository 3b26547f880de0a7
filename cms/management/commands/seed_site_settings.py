"""
Seed Site Settings Command

Creates the default storefront settings (hero copy, contact details,
order prices, testimonials). Existing values are kept unless --force is given.

Usage:
    python manage.py seed_site_settings           # Create missing keys
    python manage.py seed_site_settings --force   # Reset every default key
"""
from django.core.management.base import BaseCommand

from cms.services import seed_default_settings


class Command(BaseCommand):
    help = 'Seed default site settings'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force',
            action='store_true',
            help='Overwrite existing values with the defaults',
        )

    def handle(self, *args, **options):
        created, updated = seed_default_settings(overwrite=options['force'])
        self.stdout.write(
            self.style.SUCCESS(f'Created {created} settings, reset {updated} settings')
        )
