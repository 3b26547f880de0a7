from rest_framework import serializers

from .models import SiteSetting


class SiteSettingSerializer(serializers.ModelSerializer):
    """Admin listing of settings with the editor's name."""
    updated_by_name = serializers.SerializerMethodField()

    class Meta:
        model = SiteSetting
        fields = [
            'id', 'setting_key', 'setting_value', 'setting_type',
            'updated_by', 'updated_by_name', 'updated_at'
        ]
        read_only_fields = fields

    def get_updated_by_name(self, obj):
        return obj.updated_by.get_full_name() if obj.updated_by else None


class SettingValueSerializer(serializers.Serializer):
    value = serializers.CharField(allow_blank=True, trim_whitespace=False)
