from django.urls import path

from .order_views import (
    OrderListCreateView,
    OrderDetailView,
    OrderStatusView,
    NewOrderCountView,
)

app_name = 'orders'

urlpatterns = [
    path('', OrderListCreateView.as_view(), name='order-list'),
    path('count/new/', NewOrderCountView.as_view(), name='order-count-new'),
    path('<uuid:order_id>/', OrderDetailView.as_view(), name='order-detail'),
    path('<uuid:order_id>/status/', OrderStatusView.as_view(), name='order-status'),
]
