# Generated manually
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('STATUS_CHANGE', 'Status Change'), ('BALANCE', 'Balance'), ('INVOICE', 'Invoice'), ('SYSTEM', 'System')], max_length=20)),
                ('title_en', models.CharField(max_length=200)),
                ('title_ka', models.CharField(max_length=200)),
                ('message_en', models.TextField()),
                ('message_ka', models.TextField()),
                ('is_read', models.BooleanField(default=False)),
                ('reference_type', models.CharField(blank=True, max_length=50, null=True)),
                ('reference_id', models.CharField(blank=True, max_length=50, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'notifications',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'is_read'], name='notif_user_read_idx'),
                    models.Index(fields=['user', '-created_at'], name='notif_user_created_idx'),
                ],
            },
        ),
    ]
