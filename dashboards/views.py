"""
Dashboard API Views

GET /api/dashboard/stats/                 - overview statistics
GET /api/dashboard/activities/?limit=20   - recent activity feed
GET /api/dashboard/charts/eggs/?days=30   - daily egg production
GET /api/dashboard/charts/sales/?days=30  - daily sales totals

Permission: employees and admins
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsEmployee

from .services import FarmDashboardService

MAX_ACTIVITY_LIMIT = 100
MAX_CHART_DAYS = 366


def _positive_int(value, default, maximum):
    """Query params that are missing, malformed or < 1 fall back to the default."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < 1:
        return default
    return min(number, maximum)


class DashboardStatsView(APIView):
    permission_classes = [IsEmployee]

    def get(self, request):
        service = FarmDashboardService()
        return Response(service.get_overview_stats(), status=status.HTTP_200_OK)


class RecentActivityView(APIView):
    permission_classes = [IsEmployee]

    def get(self, request):
        limit = _positive_int(request.query_params.get('limit'), 20, MAX_ACTIVITY_LIMIT)
        service = FarmDashboardService()
        return Response(service.get_recent_activity(limit=limit), status=status.HTTP_200_OK)


class EggChartView(APIView):
    permission_classes = [IsEmployee]

    def get(self, request):
        days = _positive_int(request.query_params.get('days'), 30, MAX_CHART_DAYS)
        service = FarmDashboardService()
        return Response(service.get_egg_chart(days=days), status=status.HTTP_200_OK)


class SalesChartView(APIView):
    permission_classes = [IsEmployee]

    def get(self, request):
        days = _positive_int(request.query_params.get('days'), 30, MAX_CHART_DAYS)
        service = FarmDashboardService()
        return Response(service.get_sales_chart(days=days), status=status.HTTP_200_OK)
