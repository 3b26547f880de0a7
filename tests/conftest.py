"""
Shared pytest fixtures for the farm test suite.
"""
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

User = get_user_model()

TEST_PHONE = '+256772123456'


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture
def employee_user(db):
    return User.objects.create_user(
        username='employee@countryfarm.ug',
        email='employee@countryfarm.ug',
        password='testpass123',
        full_name='Farm Employee',
        role=User.UserRole.EMPLOYEE,
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username='admin@countryfarm.ug',
        email='admin@countryfarm.ug',
        password='testpass123',
        full_name='Farm Admin',
        role=User.UserRole.ADMIN,
    )


@pytest.fixture
def customer_user(db):
    return User.objects.create_user(
        username='buyer@example.com',
        email='buyer@example.com',
        password='testpass123',
        full_name='Storefront Buyer',
        role=User.UserRole.CUSTOMER,
    )


@pytest.fixture
def employee_client(api_client, employee_user):
    api_client.force_authenticate(user=employee_user)
    return api_client


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def customer(db, employee_user):
    from sales_revenue.models import Customer

    return Customer.objects.create(
        name='Nakato Grace',
        phone=TEST_PHONE,
        email='nakato@example.com',
        address='Matugga, Wakiso',
        created_by=employee_user,
    )


@pytest.fixture
def batch(db, employee_user):
    from flock_management.models import PoultryBatch

    return PoultryBatch.objects.create(
        batch_name='Layers A',
        bird_type='Layers',
        initial_count=500,
        cost_per_bird=Decimal('3500.00'),
        created_by=employee_user,
    )


@pytest.fixture
def order_payload():
    return {
        'customer_name': 'Okello John',
        'customer_phone': TEST_PHONE,
        'customer_email': 'okello@example.com',
        'delivery_address': 'Kasangati',
        'items': [{'product': 'eggs_tray', 'quantity': 2}],
    }
