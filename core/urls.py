"""
URL configuration for the Country Farm Management System.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

from core.health import HealthCheckView, DetailedHealthCheckView

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api/health/', HealthCheckView.as_view(), name='health'),
    path('api/health/detailed/', DetailedHealthCheckView.as_view(), name='health-detailed'),
    path('api/auth/', include('accounts.urls')),
    path('api/customers/', include('sales_revenue.customer_urls')),
    path('api/sales/', include('sales_revenue.urls')),
    path('api/orders/', include('sales_revenue.order_urls')),  # POST is public (storefront checkout)
    path('api/poultry/', include('flock_management.urls')),
    path('api/expenses/', include('expenses.urls')),
    path('api/dashboard/', include('dashboards.urls')),
    path('api/settings/', include('cms.urls')),
]
