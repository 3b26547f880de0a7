"""
Dashboard URL Configuration
"""

from django.urls import path

from .views import (
    DashboardStatsView,
    RecentActivityView,
    EggChartView,
    SalesChartView,
)

app_name = 'dashboards'

urlpatterns = [
    path('stats/', DashboardStatsView.as_view(), name='stats'),
    path('activities/', RecentActivityView.as_view(), name='activities'),
    path('charts/eggs/', EggChartView.as_view(), name='egg-chart'),
    path('charts/sales/', SalesChartView.as_view(), name='sales-chart'),
]
