"""
Flock Management API Views

GET/POST   /api/poultry/batches/
GET/PUT    /api/poultry/batches/{id}/     (detail includes egg, feed and health history)
GET/POST   /api/poultry/eggs/
GET/POST   /api/poultry/feed/
GET/POST   /api/poultry/health/           (mortality lowers the batch's live count)
"""

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsEmployee

from . import services
from .models import PoultryBatch, EggProductionRecord, FeedRecord, HealthRecord
from .serializers import (
    PoultryBatchSerializer,
    EggProductionRecordSerializer,
    FeedRecordSerializer,
    HealthRecordSerializer,
    BatchCreateSerializer,
    BatchUpdateSerializer,
    EggProductionCreateSerializer,
    FeedRecordCreateSerializer,
    HealthRecordCreateSerializer,
)


class BatchListCreateView(generics.ListAPIView):
    """List batches (filter by status/bird_type) or create a new one."""
    permission_classes = [IsEmployee]
    serializer_class = PoultryBatchSerializer
    filterset_fields = ['status', 'bird_type']
    search_fields = ['batch_name', 'bird_type', 'source']
    ordering_fields = ['created_at', 'date_acquired', 'current_count']

    def get_queryset(self):
        return PoultryBatch.objects.select_related('created_by')

    def post(self, request):
        serializer = BatchCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        batch = services.create_batch(**serializer.validated_data, created_by=request.user)
        return Response(PoultryBatchSerializer(batch).data, status=status.HTTP_201_CREATED)


class BatchDetailView(APIView):
    permission_classes = [IsEmployee]

    def get(self, request, batch_id):
        detail = services.get_batch_detail(batch_id)
        data = PoultryBatchSerializer(detail['batch']).data
        data['egg_records'] = EggProductionRecordSerializer(detail['egg_records'], many=True).data
        data['feed_records'] = FeedRecordSerializer(detail['feed_records'], many=True).data
        data['health_records'] = HealthRecordSerializer(detail['health_records'], many=True).data
        return Response(data)

    def put(self, request, batch_id):
        serializer = BatchUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        batch = services.update_batch(batch_id, **serializer.validated_data)
        return Response(PoultryBatchSerializer(batch).data)

    patch = put


class EggProductionListCreateView(generics.ListAPIView):
    permission_classes = [IsEmployee]
    serializer_class = EggProductionRecordSerializer
    filterset_fields = ['batch', 'date']
    ordering_fields = ['date', 'created_at', 'eggs_collected']

    def get_queryset(self):
        return EggProductionRecord.objects.select_related('batch')

    def post(self, request):
        serializer = EggProductionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = services.record_egg_production(**serializer.validated_data, recorded_by=request.user)
        return Response(EggProductionRecordSerializer(record).data, status=status.HTTP_201_CREATED)


class FeedRecordListCreateView(generics.ListAPIView):
    permission_classes = [IsEmployee]
    serializer_class = FeedRecordSerializer
    filterset_fields = ['batch', 'date', 'feed_type']
    ordering_fields = ['date', 'created_at', 'quantity_kg']

    def get_queryset(self):
        return FeedRecord.objects.select_related('batch')

    def post(self, request):
        serializer = FeedRecordCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = services.record_feed(**serializer.validated_data, recorded_by=request.user)
        return Response(FeedRecordSerializer(record).data, status=status.HTTP_201_CREATED)


class HealthRecordListCreateView(generics.ListAPIView):
    permission_classes = [IsEmployee]
    serializer_class = HealthRecordSerializer
    filterset_fields = ['batch', 'record_type', 'date']
    ordering_fields = ['date', 'created_at', 'mortality_count']

    def get_queryset(self):
        return HealthRecord.objects.select_related('batch')

    def post(self, request):
        serializer = HealthRecordCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = services.record_health_event(**serializer.validated_data, recorded_by=request.user)
        return Response(HealthRecordSerializer(record).data, status=status.HTTP_201_CREATED)
