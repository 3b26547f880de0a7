"""
Site settings API

GET  /api/settings/          - public {key: value} map
PUT  /api/settings/          - bulk upsert {key: value} (admin)
GET  /api/settings/all/      - full rows with editor name (admin)
PUT  /api/settings/{key}/    - update one existing key (admin)
"""

from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole

from . import services
from .models import SiteSetting
from .serializers import SiteSettingSerializer, SettingValueSerializer


class SiteSettingsView(APIView):

    def get_permissions(self):
        if self.request.method == 'GET':
            return [permissions.AllowAny()]
        return [IsAdminRole()]

    def get(self, request):
        return Response(services.get_public_settings())

    def put(self, request):
        payload = request.data
        if isinstance(payload, dict) and isinstance(payload.get('settings'), dict):
            payload = payload['settings']
        count = services.bulk_upsert_settings(payload, user=request.user)
        return Response({'message': 'Settings updated successfully', 'updated': count})


class AdminSiteSettingsListView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        queryset = SiteSetting.objects.select_related('updated_by').order_by('setting_key')
        return Response(SiteSettingSerializer(queryset, many=True).data)


class SiteSettingDetailView(APIView):
    permission_classes = [IsAdminRole]

    def put(self, request, key):
        serializer = SettingValueSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        setting = services.update_setting(key, serializer.validated_data['value'], user=request.user)
        return Response(SiteSettingSerializer(setting).data)
