"""
Default site settings seeded on first install.

Used by the 0002 data migration and the ``seed_site_settings`` command.
"""

from sales_revenue.catalog import PRODUCTS, price_setting_key

DEFAULT_SITE_SETTINGS = [
    # Hero section
    ('hero_title', 'Fresh From Our Farm'),
    ('hero_subtitle', 'To Your Table'),
    ('hero_description', "Premium quality eggs and poultry products from Matugga's finest farm. "
                         "Raised with care, delivered with love."),

    # Contact details
    ('phone_number', '+256 763 564 896'),
    ('email', 'info@countryfarm.ug'),
    ('address', 'Matugga, Wakiso District, Uganda'),
    ('whatsapp_number', '256763564896'),

    # Product cards
    ('eggs_price', 'From UGX 15,000/tray'),
    ('birds_price', 'From UGX 25,000/bird'),
    ('manure_price', 'From UGX 5,000/bag'),
    ('eggs_description', 'Farm-fresh eggs collected daily from our healthy, free-range chickens.'),
    ('birds_description', 'Healthy chickens raised with natural feed and proper care.'),
    ('manure_description', 'High-quality chicken manure for your garden and farm.'),
] + [
    # Order prices (numeric, used when pricing public orders)
    (price_setting_key(product.key), str(int(product.default_price)))
    for product in PRODUCTS
] + [
    # Headline stats
    ('stat_birds', '5000+'),
    ('stat_eggs', '10K+'),
    ('stat_customers', '500+'),
    ('stat_years', '5+'),

    # Testimonials
    ('testimonial_1_name', 'Sarah Nakato'),
    ('testimonial_1_role', 'Restaurant Owner'),
    ('testimonial_1_content', 'The quality of eggs from Country Farm is exceptional. My customers love the rich taste!'),
    ('testimonial_1_rating', '5'),
    ('testimonial_2_name', 'John Mukasa'),
    ('testimonial_2_role', 'Grocery Store Owner'),
    ('testimonial_2_content', 'Reliable delivery and consistent quality. They are my go-to supplier for fresh eggs.'),
    ('testimonial_2_rating', '5'),
    ('testimonial_3_name', 'Grace Achieng'),
    ('testimonial_3_role', 'Home Customer'),
    ('testimonial_3_content', 'Fresh, affordable, and the team is always friendly. Highly recommend!'),
    ('testimonial_3_rating', '5'),
]
