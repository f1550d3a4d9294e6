from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


PARTY_FIELDS = [
    ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
    ('code', models.CharField(max_length=20, unique=True)),
    ('name_english', models.CharField(max_length=200)),
    ('name_tamil', models.CharField(blank=True, max_length=200)),
    ('contact_person', models.CharField(blank=True, max_length=100)),
    ('phone', models.CharField(blank=True, max_length=20)),
    ('email', models.EmailField(blank=True, max_length=254)),
    ('address_english', models.TextField(blank=True)),
    ('address_tamil', models.TextField(blank=True)),
    ('gstin', models.CharField(blank=True, max_length=15)),
    ('pin_code', models.CharField(blank=True, max_length=10)),
    ('state_code', models.CharField(default='33', max_length=2)),
    ('is_active', models.BooleanField(default=True)),
    ('created_at', models.DateTimeField(auto_now_add=True)),
    ('updated_at', models.DateTimeField(auto_now=True)),
]


def party_fields():
    return [(name, field.clone()) for name, field in PARTY_FIELDS]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Customer',
            fields=party_fields() + [
                ('place_of_supply', models.CharField(default='33', max_length=2)),
            ],
            options={
                'ordering': ['name_english'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Supplier',
            fields=party_fields(),
            options={
                'ordering': ['name_english'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=20, unique=True)),
                ('name_english', models.CharField(max_length=200)),
                ('name_tamil', models.CharField(blank=True, max_length=200)),
                ('unit', models.CharField(default='KG', max_length=10)),
                ('unit_weight', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Weight of one bag in the item unit', max_digits=10)),
                ('gst_percentage', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5)),
                ('hsn_no', models.CharField(blank=True, max_length=10)),
                ('opening_stock', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
                ('description_english', models.TextField(blank=True)),
                ('description_tamil', models.TextField(blank=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['name_english'],
            },
        ),
        migrations.CreateModel(
            name='CompanySetting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('location_code', models.CharField(max_length=30)),
                ('location_name', models.CharField(blank=True, max_length=100)),
                ('company_name', models.CharField(max_length=200)),
                ('gstin', models.CharField(blank=True, max_length=15)),
                ('address_line1', models.CharField(blank=True, max_length=200)),
                ('address_line2', models.CharField(blank=True, max_length=200)),
                ('locality', models.CharField(blank=True, max_length=100)),
                ('pin_code', models.CharField(blank=True, max_length=10)),
                ('state_code', models.CharField(default='33', max_length=2)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('bank_name', models.CharField(blank=True, max_length=100)),
                ('bank_account_no', models.CharField(blank=True, max_length=30)),
                ('bank_ifsc', models.CharField(blank=True, max_length=15)),
                ('bank_branch', models.CharField(blank=True, max_length=100)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['location_code'],
            },
        ),
        migrations.CreateModel(
            name='DocumentSeries',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(max_length=50, unique=True)),
                ('prefix', models.CharField(blank=True, max_length=10)),
                ('width', models.PositiveSmallIntegerField(default=0)),
                ('floor', models.PositiveIntegerField(default=1)),
                ('last_number', models.PositiveIntegerField(default=0)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['key'],
                'verbose_name_plural': 'document series',
            },
        ),
        migrations.CreateModel(
            name='UserRole',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(choices=[('admin', 'Admin'), ('user', 'User')], default='user', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='roles', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'constraints': [models.UniqueConstraint(fields=('user', 'role'), name='uniq_user_role')],
            },
        ),
    ]
