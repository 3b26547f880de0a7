from django.urls import path

from .views import (
    ExpenseCategoryListView,
    ExpenseListCreateView,
    ExpenseDetailView,
    ExpenseSummaryView,
)

app_name = 'expenses'

urlpatterns = [
    path('', ExpenseListCreateView.as_view(), name='expense-list'),
    path('categories/', ExpenseCategoryListView.as_view(), name='expense-categories'),
    path('stats/summary/', ExpenseSummaryView.as_view(), name='expense-summary'),
    path('<uuid:expense_id>/', ExpenseDetailView.as_view(), name='expense-detail'),
]
