"""
Serializers for flock management.

Input serializers only shape and type-check the request; the bird-count
rules live in flock_management.services.
"""

from decimal import Decimal

from rest_framework import serializers

from .models import PoultryBatch, EggProductionRecord, FeedRecord, HealthRecord


# =============================================================================
# OUTPUT SERIALIZERS
# =============================================================================

class PoultryBatchSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    mortality_total = serializers.IntegerField(read_only=True)
    created_by_name = serializers.CharField(source='created_by.get_full_name', read_only=True, allow_null=True)

    class Meta:
        model = PoultryBatch
        fields = [
            'id', 'batch_name', 'bird_type', 'initial_count', 'current_count',
            'mortality_total', 'date_acquired', 'source', 'cost_per_bird', 'notes',
            'status', 'status_display', 'created_by', 'created_by_name',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class EggProductionRecordSerializer(serializers.ModelSerializer):
    batch_name = serializers.CharField(source='batch.batch_name', read_only=True)
    good_eggs = serializers.IntegerField(read_only=True)

    class Meta:
        model = EggProductionRecord
        fields = [
            'id', 'batch', 'batch_name', 'date', 'eggs_collected', 'broken_eggs',
            'good_eggs', 'notes', 'recorded_by', 'created_at'
        ]
        read_only_fields = fields


class FeedRecordSerializer(serializers.ModelSerializer):
    batch_name = serializers.CharField(source='batch.batch_name', read_only=True)

    class Meta:
        model = FeedRecord
        fields = [
            'id', 'batch', 'batch_name', 'date', 'feed_type', 'quantity_kg', 'cost',
            'supplier', 'notes', 'recorded_by', 'created_at'
        ]
        read_only_fields = fields


class HealthRecordSerializer(serializers.ModelSerializer):
    batch_name = serializers.CharField(source='batch.batch_name', read_only=True)
    record_type_display = serializers.CharField(source='get_record_type_display', read_only=True)

    class Meta:
        model = HealthRecord
        fields = [
            'id', 'batch', 'batch_name', 'date', 'record_type', 'record_type_display',
            'description', 'mortality_count', 'cost', 'administered_by', 'notes',
            'recorded_by', 'created_at'
        ]
        read_only_fields = fields


# =============================================================================
# INPUT SERIALIZERS
# =============================================================================

class BatchCreateSerializer(serializers.Serializer):
    batch_name = serializers.CharField(max_length=100)
    bird_type = serializers.CharField(max_length=50)
    initial_count = serializers.IntegerField(min_value=1)
    date_acquired = serializers.DateField(required=False)
    source = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    cost_per_bird = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class BatchUpdateSerializer(serializers.Serializer):
    batch_name = serializers.CharField(max_length=100, required=False)
    bird_type = serializers.CharField(max_length=50, required=False)
    initial_count = serializers.IntegerField(required=False)
    current_count = serializers.IntegerField(min_value=0, required=False)
    status = serializers.ChoiceField(choices=PoultryBatch.Status.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class EggProductionCreateSerializer(serializers.Serializer):
    batch_id = serializers.UUIDField()
    date = serializers.DateField(required=False)
    eggs_collected = serializers.IntegerField(min_value=0)
    broken_eggs = serializers.IntegerField(min_value=0, required=False, default=0)
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        if attrs.get('broken_eggs', 0) > attrs['eggs_collected']:
            raise serializers.ValidationError(
                {'broken_eggs': 'Broken eggs cannot exceed eggs collected'}
            )
        return attrs


class FeedRecordCreateSerializer(serializers.Serializer):
    batch_id = serializers.UUIDField()
    date = serializers.DateField(required=False)
    feed_type = serializers.CharField(max_length=100)
    quantity_kg = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    cost = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True)
    supplier = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class HealthRecordCreateSerializer(serializers.Serializer):
    batch_id = serializers.UUIDField()
    date = serializers.DateField(required=False)
    record_type = serializers.ChoiceField(choices=HealthRecord.RecordType.choices)
    description = serializers.CharField()
    mortality_count = serializers.IntegerField(min_value=0, required=False, default=0)
    cost = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True)
    administered_by = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
