from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid

from .domain import CompleteSlip, PendingSlip, SlipStatus


class SlipRecord(models.Model):
    """Database row backing one weighbridge slip."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    slip_number = models.CharField(max_length=10, unique=True)
    status = models.CharField(
        max_length=10,
        choices=SlipStatus.choices,
        default=SlipStatus.PENDING,
    )

    vehicle_number = models.CharField(max_length=50)
    material = models.CharField(max_length=200)

    # Weights in tons
    gross_weight = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0.001'))]
    )
    gross_weight_time = models.DateTimeField()

    tare_weight = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.001'))]
    )
    tare_weight_time = models.DateTimeField(null=True, blank=True)
    net_weight = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True)

    # Insertion order, used to list slips in creation order
    sequence = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'weighbridge_slips'
        ordering = ['sequence']
        indexes = [
            models.Index(fields=['status'], name='weighbridge_status_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(
                        status=SlipStatus.PENDING,
                        tare_weight__isnull=True,
                        tare_weight_time__isnull=True,
                        net_weight__isnull=True,
                    )
                    | models.Q(
                        status=SlipStatus.COMPLETE,
                        tare_weight__isnull=False,
                        tare_weight_time__isnull=False,
                        net_weight__isnull=False,
                    )
                ),
                name='slip_complete_iff_tare_recorded',
            ),
        ]

    def __str__(self):
        return f"#{self.slip_number} {self.vehicle_number} ({self.status})"

    @classmethod
    def field_values(cls, slip, sequence):
        """Column values for a domain slip."""
        values = {
            'id': slip.id,
            'slip_number': slip.slip_number,
            'status': str(slip.status),
            'vehicle_number': slip.vehicle_number,
            'material': slip.material,
            'gross_weight': slip.gross_weight,
            'gross_weight_time': slip.gross_weight_time,
            'tare_weight': None,
            'tare_weight_time': None,
            'net_weight': None,
            'sequence': sequence,
        }
        if isinstance(slip, CompleteSlip):
            values.update(
                tare_weight=slip.tare_weight,
                tare_weight_time=slip.tare_weight_time,
                net_weight=slip.net_weight,
            )
        return values

    def to_domain(self):
        """Rebuild the immutable domain slip for this row."""
        common = dict(
            id=self.id,
            slip_number=self.slip_number,
            vehicle_number=self.vehicle_number,
            material=self.material,
            gross_weight=self.gross_weight,
            gross_weight_time=self.gross_weight_time,
        )
        if self.status == SlipStatus.COMPLETE:
            return CompleteSlip(
                **common,
                tare_weight=self.tare_weight,
                tare_weight_time=self.tare_weight_time,
                net_weight=self.net_weight,
            )
        return PendingSlip(**common)
