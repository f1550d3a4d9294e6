from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import logistics.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('masters', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='OutwardEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('serial_no', models.PositiveIntegerField(unique=True)),
                ('entry_date', models.DateField()),
                ('loading_place', models.CharField(default=logistics.models.default_loading_place, max_length=30)),
                ('lorry_no', models.CharField(max_length=20)),
                ('driver_mobile', models.CharField(blank=True, max_length=15)),
                ('empty_weight', models.DecimalField(decimal_places=2, max_digits=12)),
                ('load_weight', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('net_weight', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('load_weight_updated_at', models.DateTimeField(blank=True, null=True)),
                ('weighment_photo_url', models.CharField(blank=True, max_length=500)),
                ('load_weight_photo_url', models.CharField(blank=True, max_length=500)),
                ('remarks', models.TextField(blank=True)),
                ('is_completed', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='outward_entries', to='masters.customer')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='outward_entries', to='masters.item')),
                ('load_weight_updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='load_weighments', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='outward_entries', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'outward entries',
                'ordering': ['-serial_no'],
                'indexes': [models.Index(fields=['is_completed', 'entry_date'], name='outward_completed_date_idx')],
            },
        ),
    ]
