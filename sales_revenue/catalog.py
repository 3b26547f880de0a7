"""
Storefront product catalogue for public orders.

Each product's live price is read from the site setting
``order_price_<key>``; ``default_price`` is used when that setting is
missing or unparsable.
"""

from collections import namedtuple
from decimal import Decimal

Product = namedtuple('Product', ['key', 'label', 'unit', 'default_price'])

ORDER_PRICE_SETTING_PREFIX = 'order_price_'

PRODUCTS = (
    Product('eggs_tray', 'Fresh Eggs (Tray of 30)', 'trays', Decimal('15000')),
    Product('eggs_crate', 'Fresh Eggs (Crate - 12 trays)', 'crates', Decimal('170000')),
    Product('broiler_chicken', 'Broiler Chicken (Live)', 'birds', Decimal('25000')),
    Product('layer_chicken', 'Layer Chicken (Live)', 'birds', Decimal('20000')),
    Product('kienyeji_chicken', 'Kienyeji/Local Chicken', 'birds', Decimal('35000')),
    Product('day_old_chicks', 'Day-Old Chicks', 'chicks', Decimal('3500')),
    Product('manure_bag', 'Chicken Manure (50kg bag)', 'bags', Decimal('5000')),
    Product('manure_truck', 'Chicken Manure (Truck load)', 'loads', Decimal('200000')),
)

PRODUCTS_BY_KEY = {product.key: product for product in PRODUCTS}


def get_product(key):
    return PRODUCTS_BY_KEY.get(key)


def price_setting_key(product_key):
    return f"{ORDER_PRICE_SETTING_PREFIX}{product_key}"
