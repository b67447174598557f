import django.db.models.deletion
import storefront.inventory.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='InventoryItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('size', models.CharField(max_length=50)),
                ('color', models.CharField(max_length=50)),
                ('quantity', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(choices=[('in_stock', 'In Stock'), ('low_stock', 'Low Stock'), ('out_of_stock', 'Out of Stock')], default='out_of_stock', editable=False, max_length=20)),
                ('location', models.CharField(max_length=100)),
                ('low_stock_threshold', models.PositiveIntegerField(default=storefront.inventory.models.default_low_stock_threshold)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='inventory_items', to='catalog.product')),
            ],
            options={
                'db_table': 'inventory_items',
                'ordering': ['product__name', 'size', 'color'],
                'indexes': [
                    models.Index(fields=['status'], name='idx_inventory_status'),
                    models.Index(fields=['location'], name='idx_inventory_location'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('product', 'size', 'color'), name='uniq_inventory_product_size_color'),
                ],
            },
        ),
        migrations.CreateModel(
            name='InventoryHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('change_type', models.CharField(choices=[('increase', 'Increase'), ('decrease', 'Decrease'), ('update', 'Update')], max_length=10)),
                ('quantity', models.IntegerField()),
                ('previous_quantity', models.IntegerField(blank=True, null=True)),
                ('reason', models.CharField(blank=True, max_length=200)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='history', to='inventory.inventoryitem')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='inventory_history', to='catalog.product')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inventory_changes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'inventory_history',
                'ordering': ['-created_at', '-id'],
                'verbose_name_plural': 'inventory history',
            },
        ),
    ]
