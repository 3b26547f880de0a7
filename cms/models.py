"""
CMS Models
Key/value settings for the public storefront. Upsert semantics by key.
"""
import uuid
from django.conf import settings
from django.db import models


class SiteSetting(models.Model):
    """
    A single storefront setting (hero copy, contact details, order prices...).
    Public can read all values; only admins can change them.
    """

    class SettingType(models.TextChoices):
        TEXT = 'text', 'Text'
        NUMBER = 'number', 'Number'
        JSON = 'json', 'JSON'
        IMAGE = 'image', 'Image URL'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    setting_key = models.CharField(
        max_length=100,
        unique=True,
        help_text="Unique key (e.g., 'hero_title', 'order_price_eggs_tray')"
    )
    setting_value = models.TextField(blank=True, default='')
    setting_type = models.CharField(
        max_length=20,
        choices=SettingType.choices,
        default=SettingType.TEXT
    )

    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='updated_site_settings'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'site_settings'
        ordering = ['setting_key']
        verbose_name = 'Site Setting'
        verbose_name_plural = 'Site Settings'

    def __str__(self):
        return f"{self.setting_key} = {self.setting_value[:40]}"
