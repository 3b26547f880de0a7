from django.urls import path

from .views import SaleListCreateView, SaleDetailView, SalesSummaryView

app_name = 'sales'

urlpatterns = [
    path('', SaleListCreateView.as_view(), name='sale-list'),
    path('stats/summary/', SalesSummaryView.as_view(), name='sale-summary'),
    path('<uuid:sale_id>/', SaleDetailView.as_view(), name='sale-detail'),
]
