"""
Management command to create (or promote) a back-office user.

Usage:
    python manage.py create_farm_user --email admin@countryfarm.ug --password secret --role admin
    python manage.py create_farm_user --email worker@countryfarm.ug --password secret --role employee
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import User


class Command(BaseCommand):
    help = 'Creates or updates an employee/admin account for the farm back-office'

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True)
        parser.add_argument('--password', required=True)
        parser.add_argument('--full-name', default='')
        parser.add_argument(
            '--role',
            choices=[User.UserRole.EMPLOYEE, User.UserRole.ADMIN],
            default=User.UserRole.ADMIN,
        )

    def handle(self, *args, **options):
        email = options['email'].lower()
        role = options['role']
        password = options['password']

        if not password:
            raise CommandError('Password must not be empty')

        with transaction.atomic():
            user = User.objects.filter(email__iexact=email).first()
            if user:
                self.stdout.write(
                    self.style.WARNING(f'User with email {email} already exists.')
                )
                user.role = role
                user.is_active = True
                user.is_staff = role == User.UserRole.ADMIN
                if options['full_name']:
                    user.full_name = options['full_name']
                user.set_password(password)
                user.save()
                self.stdout.write(self.style.SUCCESS(f'Updated existing user: {email}'))
            else:
                user = User.objects.create_user(
                    username=email,
                    email=email,
                    password=password,
                    full_name=options['full_name'],
                    role=role,
                    is_staff=role == User.UserRole.ADMIN,
                )
                self.stdout.write(self.style.SUCCESS(f'Created new user: {email}'))

        self.stdout.write('\n' + '=' * 60)
        self.stdout.write(f'Email:          {user.email}')
        self.stdout.write(f'Role:           {user.get_role_display()}')
        self.stdout.write(f'Is Staff:       {user.is_staff}')
        self.stdout.write('=' * 60)
        self.stdout.write('\nLog in with POST /api/auth/login/ {"email": ..., "password": ...}')
