from django.db import migrations


def seed_defaults(apps, schema_editor):
    from cms.defaults import DEFAULT_SITE_SETTINGS

    SiteSetting = apps.get_model('cms', 'SiteSetting')
    for key, value in DEFAULT_SITE_SETTINGS:
        SiteSetting.objects.get_or_create(setting_key=key, defaults={'setting_value': value})


def remove_defaults(apps, schema_editor):
    from cms.defaults import DEFAULT_SITE_SETTINGS

    SiteSetting = apps.get_model('cms', 'SiteSetting')
    SiteSetting.objects.filter(setting_key__in=[key for key, _ in DEFAULT_SITE_SETTINGS]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('cms', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_defaults, remove_defaults),
    ]
