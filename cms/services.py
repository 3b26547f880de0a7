"""
Site settings services: reads for the storefront and order pricing,
single-key updates and transactional bulk upserts for admins.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.db import transaction

from core.exceptions import NotFound, ValidationFailed
from sales_revenue.catalog import get_product, price_setting_key

from .defaults import DEFAULT_SITE_SETTINGS
from .models import SiteSetting

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def get_public_settings():
    """Return every setting as a flat {key: value} map."""
    return dict(SiteSetting.objects.values_list('setting_key', 'setting_value'))


def get_setting(key, default=None):
    value = (
        SiteSetting.objects
        .filter(setting_key=key)
        .values_list('setting_value', flat=True)
        .first()
    )
    return value if value else default


def get_order_price(product_key):
    """
    Current unit price for a catalogue product.

    Reads ``order_price_<product>``; falls back to the catalogue default when
    the setting is missing, empty, non-numeric or negative. The result is
    rounded half-up to whole cents, the precision OrderItem stores.
    """
    product = get_product(product_key)
    if product is None:
        raise ValidationFailed(
            f"Unknown product: {product_key}",
            details={'product': product_key}
        )

    raw = get_setting(price_setting_key(product_key))
    if raw is None:
        return product.default_price

    try:
        price = Decimal(str(raw).replace(',', '').strip())
    except InvalidOperation:
        logger.warning(f"Ignoring non-numeric price setting for {product_key}: {raw!r}")
        return product.default_price

    if not price.is_finite() or price < 0:
        logger.warning(f"Ignoring invalid price setting for {product_key}: {raw!r}")
        return product.default_price

    try:
        return price.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        logger.warning(f"Ignoring out-of-range price setting for {product_key}: {raw!r}")
        return product.default_price


def update_setting(key, value, user=None):
    """Update one existing setting. Unknown keys are NotFound."""
    setting = SiteSetting.objects.filter(setting_key=key).first()
    if setting is None:
        raise NotFound(f"Setting '{key}' not found")

    setting.setting_value = '' if value is None else str(value)
    setting.updated_by = user
    setting.save(update_fields=['setting_value', 'updated_by', 'updated_at'])
    logger.info(f"Site setting {key} updated by {getattr(user, 'email', 'system')}")
    return setting


def bulk_upsert_settings(values, user=None):
    """
    Insert or update many settings in one transaction.

    Args:
        values: {key: value} mapping
        user: acting admin, stored as updated_by

    Returns:
        Number of keys written
    """
    if not isinstance(values, dict) or not values:
        raise ValidationFailed('Settings must be a non-empty object of key/value pairs')

    with transaction.atomic():
        for key, value in values.items():
            SiteSetting.objects.update_or_create(
                setting_key=key,
                defaults={
                    'setting_value': '' if value is None else str(value),
                    'updated_by': user,
                }
            )

    logger.info(f"Bulk-updated {len(values)} site settings")
    return len(values)


def seed_default_settings(overwrite=False):
    """
    Create the default settings. Existing keys are left alone unless
    ``overwrite`` is set.

    Returns:
        (created, updated) counts
    """
    created = updated = 0
    with transaction.atomic():
        for key, value in DEFAULT_SITE_SETTINGS:
            setting, was_created = SiteSetting.objects.get_or_create(
                setting_key=key,
                defaults={'setting_value': value}
            )
            if was_created:
                created += 1
            elif overwrite and setting.setting_value != value:
                setting.setting_value = value
                setting.save(update_fields=['setting_value', 'updated_at'])
                updated += 1
    return created, updated
