"""
Views for Expense Tracking.

API Endpoints:
- /api/expenses/ - List/create expenses
- /api/expenses/{id}/ - Retrieve/update/delete expense
- /api/expenses/categories/ - Expense categories (constants)
- /api/expenses/stats/summary/ - Totals (all-time, today, month, by category)
"""

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsEmployee
from core.exceptions import NotFound

from . import services
from .models import Expense, ExpenseCategory
from .serializers import ExpenseSerializer, ExpenseInputSerializer


class ExpenseCategoryListView(APIView):
    """
    GET /api/expenses/categories/

    List all expense categories (system constants).
    """
    permission_classes = [IsEmployee]

    def get(self, request):
        return Response([
            {'value': value, 'label': label}
            for value, label in ExpenseCategory.choices
        ])


class ExpenseListCreateView(generics.ListAPIView):
    """
    GET /api/expenses/
    POST /api/expenses/

    Filter with ?category=, ?start_date=, ?end_date=, ?search=.
    """
    permission_classes = [IsEmployee]
    serializer_class = ExpenseSerializer
    filterset_fields = ['category', 'date']
    search_fields = ['description', 'receipt_number', 'notes']
    ordering_fields = ['date', 'amount', 'category', 'created_at']

    def get_queryset(self):
        queryset = Expense.objects.select_related('recorded_by')

        # Filter by date range
        start_date = self.request.query_params.get('start_date')
        end_date = self.request.query_params.get('end_date')
        if start_date:
            queryset = queryset.filter(date__gte=start_date)
        if end_date:
            queryset = queryset.filter(date__lte=end_date)

        return queryset

    def post(self, request):
        serializer = ExpenseInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        expense = services.record_expense(**serializer.validated_data, recorded_by=request.user)
        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


class ExpenseDetailView(APIView):
    """
    GET/PUT/DELETE /api/expenses/{id}/
    """
    permission_classes = [IsEmployee]

    def get(self, request, expense_id):
        expense = Expense.objects.select_related('recorded_by').filter(pk=expense_id).first()
        if expense is None:
            raise NotFound('Expense not found')
        return Response(ExpenseSerializer(expense).data)

    def put(self, request, expense_id):
        serializer = ExpenseInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        expense = services.update_expense(expense_id, **serializer.validated_data)
        return Response(ExpenseSerializer(expense).data)

    patch = put

    def delete(self, request, expense_id):
        services.delete_expense(expense_id)
        return Response({'message': 'Expense deleted successfully'})


class ExpenseSummaryView(APIView):
    permission_classes = [IsEmployee]

    def get(self, request):
        return Response(services.expense_summary())
