from django.contrib import admin

from .models import PoultryBatch, EggProductionRecord, FeedRecord, HealthRecord


@admin.register(PoultryBatch)
class PoultryBatchAdmin(admin.ModelAdmin):
    list_display = ('batch_name', 'bird_type', 'initial_count', 'current_count', 'status', 'date_acquired')
    list_filter = ('status', 'bird_type')
    search_fields = ('batch_name', 'bird_type', 'source')
    readonly_fields = ('initial_count', 'current_count', 'created_by', 'created_at', 'updated_at')

    def get_readonly_fields(self, request, obj=None):
        # initial_count is editable only when the batch is first created
        if obj is None:
            return ('created_by', 'created_at', 'updated_at')
        return self.readonly_fields


@admin.register(EggProductionRecord)
class EggProductionRecordAdmin(admin.ModelAdmin):
    list_display = ('batch', 'date', 'eggs_collected', 'broken_eggs', 'recorded_by')
    list_filter = ('date',)
    date_hierarchy = 'date'


@admin.register(FeedRecord)
class FeedRecordAdmin(admin.ModelAdmin):
    list_display = ('batch', 'date', 'feed_type', 'quantity_kg', 'cost', 'supplier')
    list_filter = ('feed_type',)
    date_hierarchy = 'date'


@admin.register(HealthRecord)
class HealthRecordAdmin(admin.ModelAdmin):
    list_display = ('batch', 'date', 'record_type', 'mortality_count', 'cost')
    list_filter = ('record_type',)
    date_hierarchy = 'date'

    # Health records go through the API so mortality updates the live count
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
