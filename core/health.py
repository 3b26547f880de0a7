"""
Health check endpoints.

GET /api/health/           - liveness + database connectivity (public)
GET /api/health/detailed/  - adds row counts per table (admin)
"""

import logging

from django.conf import settings
from django.db import DatabaseError, connection
from django.utils import timezone
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole

logger = logging.getLogger(__name__)


def _database_ok():
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
            cursor.fetchone()
        return True, None
    except DatabaseError as e:
        logger.error(f"Health check database query failed: {e}", exc_info=True)
        return False, str(e)


class HealthCheckView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        db_ok, db_error = _database_ok()
        body = {
            'status': 'healthy' if db_ok else 'unhealthy',
            'timestamp': timezone.now().isoformat(),
            'environment': settings.ENVIRONMENT,
            'database': 'connected' if db_ok else 'unavailable',
        }
        if not db_ok:
            body['error'] = db_error if settings.DEBUG else 'Database unavailable'
            return Response(body, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(body)


class DetailedHealthCheckView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        from accounts.models import User
        from cms.models import SiteSetting
        from expenses.models import Expense
        from flock_management.models import (
            EggProductionRecord, FeedRecord, HealthRecord, PoultryBatch,
        )
        from sales_revenue.models import Customer, Sale
        from sales_revenue.order_models import Order

        db_ok, db_error = _database_ok()
        if not db_ok:
            return Response(
                {
                    'status': 'unhealthy',
                    'database': 'unavailable',
                    'error': db_error if settings.DEBUG else 'Database unavailable',
                },
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )

        tables = {
            'users': User,
            'customers': Customer,
            'poultry_batches': PoultryBatch,
            'egg_production': EggProductionRecord,
            'feed_records': FeedRecord,
            'health_records': HealthRecord,
            'sales': Sale,
            'expenses': Expense,
            'orders': Order,
            'site_settings': SiteSetting,
        }
        return Response({
            'status': 'healthy',
            'timestamp': timezone.now().isoformat(),
            'environment': settings.ENVIRONMENT,
            'database': {
                'vendor': connection.vendor,
                'status': 'connected',
            },
            'counts': {name: model.objects.count() for name, model in tables.items()},
        })
