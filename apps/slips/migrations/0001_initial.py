# Generated manually for slips app

import uuid
from decimal import Decimal
import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='SlipRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('slip_number', models.CharField(max_length=10, unique=True)),
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('Complete', 'Complete')], default='Pending', max_length=10)),
                ('vehicle_number', models.CharField(max_length=50)),
                ('material', models.CharField(max_length=200)),
                ('gross_weight', models.DecimalField(decimal_places=3, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.001'))])),
                ('gross_weight_time', models.DateTimeField()),
                ('tare_weight', models.DecimalField(blank=True, decimal_places=3, max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.001'))])),
                ('tare_weight_time', models.DateTimeField(blank=True, null=True)),
                ('net_weight', models.DecimalField(blank=True, decimal_places=3, max_digits=10, null=True)),
                ('sequence', models.PositiveIntegerField(default=0)),
            ],
            options={
                'db_table': 'weighbridge_slips',
                'ordering': ['sequence'],
                'indexes': [models.Index(fields=['status'], name='weighbridge_status_idx')],
                'constraints': [
                    models.CheckConstraint(
                        condition=(
                            models.Q(
                                status='Pending',
                                tare_weight__isnull=True,
                                tare_weight_time__isnull=True,
                                net_weight__isnull=True,
                            )
                            | models.Q(
                                status='Complete',
                                tare_weight__isnull=False,
                                tare_weight_time__isnull=False,
                                net_weight__isnull=False,
                            )
                        ),
                        name='slip_complete_iff_tare_recorded',
                    ),
                ],
            },
        ),
    ]
