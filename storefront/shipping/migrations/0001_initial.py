import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='ShippingZone',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=120)),
                ('countries', models.JSONField(default=list, help_text='ISO-3166 alpha-2 country codes, e.g. ["US", "CA"]')),
                ('regions', models.JSONField(blank=True, default=list)),
                ('is_active', models.BooleanField(default=True)),
                ('order', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'shipping_zones',
                'ordering': ['order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='ShippingRate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=120)),
                ('rate_type', models.CharField(choices=[('flat', 'Flat Rate'), ('weight', 'Weight Based'), ('price', 'Price Based')], default='flat', max_length=10)),
                ('base_rate', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('conditions', models.JSONField(blank=True, default=list)),
                ('additional_fee', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('free_shipping_threshold', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('estimated_days_min', models.PositiveIntegerField(default=0)),
                ('estimated_days_max', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('zone', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rates', to='shipping.shippingzone')),
            ],
            options={
                'db_table': 'shipping_rates',
                'ordering': ['zone', 'base_rate', 'name'],
                'indexes': [models.Index(fields=['zone', 'is_active'], name='idx_rate_zone_active')],
            },
        ),
    ]
