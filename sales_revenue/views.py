"""
Customer and Sales API Views

GET/POST         /api/customers/
GET/PUT/DELETE   /api/customers/{id}/        (delete refused while sales exist)
GET/POST         /api/sales/                 (POST adds to customer total_purchases)
GET/PUT/DELETE   /api/sales/{id}/            (DELETE reverses the stored total)
GET              /api/sales/stats/summary/
"""

from django.db.models import Count
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsEmployee
from core.exceptions import NotFound

from . import services
from .models import Customer, Sale
from .serializers import (
    CustomerSerializer,
    CustomerCreateSerializer,
    CustomerUpdateSerializer,
    SaleSerializer,
    SaleCreateSerializer,
    SaleUpdateSerializer,
)


# =============================================================================
# CUSTOMERS
# =============================================================================

class CustomerListCreateView(generics.ListAPIView):
    permission_classes = [IsEmployee]
    serializer_class = CustomerSerializer
    search_fields = ['name', 'email', 'phone']
    ordering_fields = ['name', 'created_at', 'total_purchases']

    def get_queryset(self):
        return Customer.objects.annotate(sales_count=Count('sales'))

    def post(self, request):
        serializer = CustomerCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        customer = services.create_customer(**serializer.validated_data, created_by=request.user)
        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)


class CustomerDetailView(APIView):
    permission_classes = [IsEmployee]

    def get(self, request, customer_id):
        customer = (
            Customer.objects
            .annotate(sales_count=Count('sales'))
            .filter(pk=customer_id)
            .first()
        )
        if customer is None:
            raise NotFound('Customer not found')
        return Response(CustomerSerializer(customer).data)

    def put(self, request, customer_id):
        serializer = CustomerUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        customer = services.update_customer(customer_id, **serializer.validated_data)
        return Response(CustomerSerializer(customer).data)

    patch = put

    def delete(self, request, customer_id):
        services.delete_customer(customer_id)
        return Response({'message': 'Customer deleted successfully'})


# =============================================================================
# SALES
# =============================================================================

class SaleListCreateView(generics.ListAPIView):
    """List sales (filter by customer/sale_type/payment_status/sale_date) or record one."""
    permission_classes = [IsEmployee]
    serializer_class = SaleSerializer
    filterset_fields = ['customer', 'sale_type', 'payment_status', 'sale_date']
    search_fields = ['customer__name', 'notes']
    ordering_fields = ['sale_date', 'created_at', 'total_amount']

    def get_queryset(self):
        return Sale.objects.select_related('customer')

    def post(self, request):
        serializer = SaleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sale = services.record_sale(**serializer.validated_data, recorded_by=request.user)
        return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)


class SaleDetailView(APIView):
    permission_classes = [IsEmployee]

    def get(self, request, sale_id):
        sale = Sale.objects.select_related('customer').filter(pk=sale_id).first()
        if sale is None:
            raise NotFound('Sale not found')
        return Response(SaleSerializer(sale).data)

    def put(self, request, sale_id):
        serializer = SaleUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        sale = services.update_sale(sale_id, **serializer.validated_data)
        return Response(SaleSerializer(sale).data)

    patch = put

    def delete(self, request, sale_id):
        services.delete_sale(sale_id)
        return Response({'message': 'Sale deleted successfully'})


class SalesSummaryView(APIView):
    permission_classes = [IsEmployee]

    def get(self, request):
        return Response(services.sales_summary())
