from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


def amount_field():
    return models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('masters', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='CustomerLedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('transaction_date', models.DateField()),
                ('transaction_type', models.CharField(choices=[('sale', 'Sale'), ('receipt', 'Receipt'), ('credit_note', 'Credit Note'), ('debit_note', 'Debit Note'), ('opening', 'Opening Balance')], max_length=20)),
                ('reference_id', models.BigIntegerField(blank=True, null=True)),
                ('debit_amount', amount_field()),
                ('credit_amount', amount_field()),
                ('balance', amount_field()),
                ('description', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='masters.customer')),
            ],
            options={
                'verbose_name_plural': 'customer ledger entries',
                'ordering': ['transaction_date', 'id'],
                'indexes': [models.Index(fields=['customer', 'transaction_date'], name='custledger_party_date_idx')],
                'constraints': [models.UniqueConstraint(fields=('transaction_type', 'reference_id'), name='uniq_customer_ledger_reference')],
            },
        ),
        migrations.CreateModel(
            name='SupplierLedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('transaction_date', models.DateField()),
                ('transaction_type', models.CharField(choices=[('purchase', 'Purchase'), ('payment', 'Payment'), ('opening', 'Opening Balance')], max_length=20)),
                ('reference_id', models.BigIntegerField(blank=True, null=True)),
                ('debit_amount', amount_field()),
                ('credit_amount', amount_field()),
                ('balance', amount_field()),
                ('description', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='masters.supplier')),
            ],
            options={
                'verbose_name_plural': 'supplier ledger entries',
                'ordering': ['transaction_date', 'id'],
                'indexes': [models.Index(fields=['supplier', 'transaction_date'], name='suppledger_party_date_idx')],
                'constraints': [models.UniqueConstraint(fields=('transaction_type', 'reference_id'), name='uniq_supplier_ledger_reference')],
            },
        ),
        migrations.CreateModel(
            name='StockLedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('mill', models.CharField(blank=True, max_length=50)),
                ('transaction_date', models.DateField()),
                ('transaction_type', models.CharField(choices=[('purchase', 'Purchase'), ('sale', 'Sale'), ('adjustment', 'Adjustment')], max_length=20)),
                ('reference_id', models.BigIntegerField(blank=True, null=True)),
                ('quantity_in', amount_field()),
                ('quantity_out', amount_field()),
                ('running_stock', amount_field()),
                ('description', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_entries', to='masters.item')),
            ],
            options={
                'verbose_name_plural': 'stock ledger entries',
                'ordering': ['transaction_date', 'id'],
                'indexes': [models.Index(fields=['item', 'transaction_date'], name='stockledger_item_date_idx')],
                'constraints': [models.UniqueConstraint(fields=('transaction_type', 'reference_id'), name='uniq_stock_ledger_reference')],
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=50)),
                ('model', models.CharField(max_length=100)),
                ('object_id', models.CharField(max_length=50)),
                ('note', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
    ]
