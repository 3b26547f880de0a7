from django.contrib import admin

from .models import SiteSetting


@admin.register(SiteSetting)
class SiteSettingAdmin(admin.ModelAdmin):
    list_display = ('setting_key', 'setting_value', 'setting_type', 'updated_by', 'updated_at')
    list_filter = ('setting_type',)
    search_fields = ('setting_key', 'setting_value')
    readonly_fields = ('updated_by', 'created_at', 'updated_at')
