# Generated manually
import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('locations', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Vehicle',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('vin', models.CharField(max_length=17, unique=True)),
                ('year', models.PositiveIntegerField()),
                ('color', models.CharField(blank=True, default='', max_length=50)),
                ('damage_type', models.CharField(choices=[('CLEAN', 'Clean'), ('SALVAGE', 'Salvage'), ('REBUILT', 'Rebuilt'), ('FLOOD', 'Flood'), ('VANDALISM', 'Vandalism'), ('HAIL', 'Hail'), ('MECHANICAL', 'Mechanical'), ('OTHER', 'Other')], default='CLEAN', max_length=20)),
                ('has_keys', models.BooleanField(default=False)),
                ('lot_number', models.CharField(max_length=50)),
                ('auction_link', models.URLField(blank=True, default='', max_length=500)),
                ('ship_name', models.CharField(blank=True, default='', max_length=100)),
                ('container_number', models.CharField(blank=True, default='', max_length=50)),
                ('eta', models.DateField(blank=True, null=True)),
                ('transportation_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('is_archived', models.BooleanField(default=False)),
                ('archived_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('auction', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='catalog.auction')),
                ('city', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='locations.city')),
                ('country', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='locations.country')),
                ('dealer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to=settings.AUTH_USER_MODEL)),
                ('make', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='catalog.make')),
                ('model', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='catalog.vehiclemodel')),
                ('port', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='locations.port')),
                ('state', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='locations.state')),
                ('status', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vehicles', to='catalog.status')),
            ],
            options={
                'db_table': 'vehicles',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['dealer', 'is_archived'], name='vehicles_dealer_arch_idx'),
                    models.Index(fields=['status', 'is_archived'], name='vehicles_status_arch_idx'),
                    models.Index(fields=['lot_number'], name='vehicles_lot_idx'),
                    models.Index(fields=['-created_at'], name='vehicles_created_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='VehiclePhoto',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('url', models.URLField(max_length=500)),
                ('stage', models.CharField(choices=[('AUCTION', 'Auction'), ('PORT', 'Port'), ('DELIVERY', 'Delivery')], max_length=10)),
                ('order', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('vehicle', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='photos', to='vehicles.vehicle')),
            ],
            options={
                'db_table': 'vehicle_photos',
                'ordering': ['order', 'id'],
            },
        ),
        migrations.CreateModel(
            name='VehicleStatusHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('changed_at', models.DateTimeField(auto_now_add=True)),
                ('changed_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='status_changes', to=settings.AUTH_USER_MODEL)),
                ('status', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='history_entries', to='catalog.status')),
                ('vehicle', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='status_history', to='vehicles.vehicle')),
            ],
            options={
                'db_table': 'vehicle_status_history',
                'ordering': ['-changed_at', '-id'],
                'verbose_name_plural': 'vehicle status history',
            },
        ),
        migrations.CreateModel(
            name='VehicleComment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('content', models.TextField(max_length=2000)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='vehicle_comments', to=settings.AUTH_USER_MODEL)),
                ('vehicle', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='comments', to='vehicles.vehicle')),
            ],
            options={
                'db_table': 'vehicle_comments',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
