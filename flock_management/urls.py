from django.urls import path

from .views import (
    BatchListCreateView,
    BatchDetailView,
    EggProductionListCreateView,
    FeedRecordListCreateView,
    HealthRecordListCreateView,
)

app_name = 'flock_management'

urlpatterns = [
    path('batches/', BatchListCreateView.as_view(), name='batch-list'),
    path('batches/<uuid:batch_id>/', BatchDetailView.as_view(), name='batch-detail'),
    path('eggs/', EggProductionListCreateView.as_view(), name='egg-list'),
    path('feed/', FeedRecordListCreateView.as_view(), name='feed-list'),
    path('health/', HealthRecordListCreateView.as_view(), name='health-list'),
]
