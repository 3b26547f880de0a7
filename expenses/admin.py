from django.contrib import admin

from .models import Expense


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ('date', 'category', 'description', 'amount', 'payment_method', 'recorded_by')
    list_filter = ('category', 'payment_method')
    search_fields = ('description', 'receipt_number', 'notes')
    date_hierarchy = 'date'
    readonly_fields = ('recorded_by', 'created_at', 'updated_at')
