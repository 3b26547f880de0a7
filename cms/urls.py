from django.urls import path

from .views import SiteSettingsView, AdminSiteSettingsListView, SiteSettingDetailView

app_name = 'cms'

urlpatterns = [
    path('', SiteSettingsView.as_view(), name='site-settings'),
    path('all/', AdminSiteSettingsListView.as_view(), name='site-settings-all'),
    path('<str:key>/', SiteSettingDetailView.as_view(), name='site-setting-detail'),
]
