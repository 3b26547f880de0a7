"""
CMS App Configuration
Site settings for the public storefront (contact details, copy, order prices).
"""
from django.apps import AppConfig


class CmsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'cms'
    verbose_name = 'Site Settings'
