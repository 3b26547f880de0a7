import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PoultryBatch',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('batch_name', models.CharField(max_length=100)),
                ('bird_type', models.CharField(help_text='Bird type (e.g., Layers, Broilers, Kienyeji)', max_length=50)),
                ('initial_count', models.PositiveIntegerField(help_text='Number of birds at acquisition. Cannot change after creation.', validators=[django.core.validators.MinValueValidator(1)])),
                ('current_count', models.IntegerField(help_text='Live birds. Lowered only by recorded mortality.')),
                ('date_acquired', models.DateField(default=django.utils.timezone.localdate)),
                ('source', models.CharField(blank=True, max_length=200)),
                ('cost_per_bird', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('notes', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('sold', 'Sold'), ('archived', 'Archived')], db_index=True, default='active', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_batches', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Poultry Batch',
                'verbose_name_plural': 'Poultry Batches',
                'db_table': 'poultry_batches',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status', '-created_at'], name='batch_status_created_idx')],
                'constraints': [models.CheckConstraint(condition=models.Q(('current_count__gte', 0)), name='batch_current_count_non_negative')],
            },
        ),
        migrations.CreateModel(
            name='EggProductionRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField(db_index=True, default=django.utils.timezone.localdate)),
                ('eggs_collected', models.PositiveIntegerField()),
                ('broken_eggs', models.PositiveIntegerField(default=0)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='egg_records', to='flock_management.poultrybatch')),
                ('recorded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='egg_records', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'egg_production',
                'ordering': ['-date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='FeedRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField(db_index=True, default=django.utils.timezone.localdate)),
                ('feed_type', models.CharField(max_length=100)),
                ('quantity_kg', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('cost', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('supplier', models.CharField(blank=True, max_length=200)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='feed_records', to='flock_management.poultrybatch')),
                ('recorded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='feed_records', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'feed_records',
                'ordering': ['-date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='HealthRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField(db_index=True, default=django.utils.timezone.localdate)),
                ('record_type', models.CharField(choices=[('vaccination', 'Vaccination'), ('medication', 'Medication'), ('checkup', 'Checkup'), ('mortality', 'Mortality'), ('other', 'Other')], db_index=True, max_length=20)),
                ('description', models.TextField()),
                ('mortality_count', models.PositiveIntegerField(default=0)),
                ('cost', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('administered_by', models.CharField(blank=True, max_length=200)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='health_records', to='flock_management.poultrybatch')),
                ('recorded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='health_records', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'health_records',
                'ordering': ['-date', '-created_at'],
            },
        ),
    ]
