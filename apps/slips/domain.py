"""
Slip domain types.

A weighbridge slip is opened when the loaded vehicle is weighed (gross
weight) and closed when the empty vehicle is weighed (tare weight). The
two lifecycle states are separate immutable types:

    PendingSlip --complete()--> CompleteSlip

Only `PendingSlip.complete` builds a `CompleteSlip`, and a `CompleteSlip`
has no transition of its own, so tare and net weight are set exactly once.

This module is pure: no storage, no locking. `SlipStore` owns those.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import ClassVar, Iterable, Union
from uuid import UUID, uuid4

from django.db import models

from .exceptions import PersistenceError, ValidationError


SLIP_NUMBER_WIDTH = 5
VEHICLE_NUMBER_MAX_LENGTH = 50
MATERIAL_MAX_LENGTH = 200
WEIGHT_QUANTUM = Decimal('0.001')
WEIGHT_MAX_TONS = Decimal('10000000')


class SlipStatus(models.TextChoices):
    PENDING = 'Pending', 'Pending'
    COMPLETE = 'Complete', 'Complete'


def parse_weight(value, label: str) -> Decimal:
    """
    Validate a weight in tons and return it as a 3-place Decimal.

    Accepts Decimal, int, float or numeric strings. Rejects booleans,
    non-finite values, values <= 0, values with sub-kilogram precision
    and values of 10,000,000 tons or more.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{label} must be a number.")
    try:
        weight = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{label} must be a number.")

    if not weight.is_finite():
        raise ValidationError(f"{label} must be a finite number.")
    if weight <= 0:
        raise ValidationError(f"{label} must be greater than 0.")
    if weight >= WEIGHT_MAX_TONS:
        raise ValidationError(f"{label} must be less than {WEIGHT_MAX_TONS:.0f} ton.")

    quantized = weight.quantize(WEIGHT_QUANTUM)
    if quantized != weight:
        raise ValidationError(f"{label} allows at most 3 decimal places.")
    return quantized


def clean_text(value, label: str, max_length: int) -> str:
    """Return `value` trimmed; reject non-strings, blank and overlong values."""
    if not isinstance(value, str):
        raise ValidationError(f"{label} is required.")
    cleaned = value.strip()
    if not cleaned:
        raise ValidationError(f"{label} is required.")
    if len(cleaned) > max_length:
        raise ValidationError(f"{label} must be at most {max_length} characters.")
    return cleaned


def format_slip_number(number: int) -> str:
    return f"{number:0{SLIP_NUMBER_WIDTH}d}"


def next_slip_number(slips: Iterable['Slip']) -> str:
    """
    Allocate the number following the highest existing slip number.

    Starts at "00001" for an empty collection. Not safe against
    concurrent callers on its own; the store serializes creation.
    """
    highest = max((int(slip.slip_number) for slip in slips), default=0)
    return format_slip_number(highest + 1)


@dataclass(frozen=True)
class BaseSlip:
    """Fields shared by both lifecycle states, fixed at creation."""

    id: UUID
    slip_number: str
    vehicle_number: str
    material: str
    gross_weight: Decimal
    gross_weight_time: datetime

    status: ClassVar[str]

    @property
    def is_complete(self) -> bool:
        return self.status == SlipStatus.COMPLETE


@dataclass(frozen=True)
class PendingSlip(BaseSlip):
    """Slip awaiting its tare weighing."""

    status: ClassVar[str] = SlipStatus.PENDING

    @classmethod
    def open(
        cls,
        *,
        slip_number: str,
        vehicle_number,
        material,
        gross_weight,
        at: datetime,
    ) -> 'PendingSlip':
        """
        Validate creation input and build a new Pending slip.

        Raises:
            ValidationError: If vehicle number or material is blank, or
                the gross weight is not a positive finite number.
        """
        vehicle_number = clean_text(vehicle_number, 'Vehicle number', VEHICLE_NUMBER_MAX_LENGTH).upper()
        material = clean_text(material, 'Material', MATERIAL_MAX_LENGTH)
        gross = parse_weight(gross_weight, 'Gross weight')
        return cls(
            id=uuid4(),
            slip_number=slip_number,
            vehicle_number=vehicle_number,
            material=material,
            gross_weight=gross,
            gross_weight_time=at,
        )

    def complete(self, tare_weight, at: datetime) -> 'CompleteSlip':
        """
        Record the tare weighing and derive the net weight.

        Net weight is the absolute difference of gross and tare, so a tare
        above the gross weight is accepted as entered.
        """
        tare = parse_weight(tare_weight, 'Tare weight')
        return CompleteSlip(
            id=self.id,
            slip_number=self.slip_number,
            vehicle_number=self.vehicle_number,
            material=self.material,
            gross_weight=self.gross_weight,
            gross_weight_time=self.gross_weight_time,
            tare_weight=tare,
            tare_weight_time=at,
            net_weight=abs(self.gross_weight - tare),
        )


@dataclass(frozen=True)
class CompleteSlip(BaseSlip):
    """Slip with both weighings recorded. Terminal state."""

    tare_weight: Decimal
    tare_weight_time: datetime
    net_weight: Decimal

    status: ClassVar[str] = SlipStatus.COMPLETE


Slip = Union[PendingSlip, CompleteSlip]

COMPLETION_KEYS = ('tareWeight', 'tareWeightTime', 'netWeight')


# =============================================================================
# Persisted form
# =============================================================================

def slip_to_dict(slip: Slip) -> dict:
    """
    Serialize a slip to its persisted form.

    Keys are camelCase, weights are decimal strings and times ISO-8601.
    Completion keys are omitted entirely for Pending slips.
    """
    data = {
        'id': str(slip.id),
        'slipNumber': slip.slip_number,
        'status': str(slip.status),
        'vehicleNumber': slip.vehicle_number,
        'material': slip.material,
        'grossWeight': str(slip.gross_weight),
        'grossWeightTime': slip.gross_weight_time.isoformat(),
    }
    if isinstance(slip, CompleteSlip):
        data['tareWeight'] = str(slip.tare_weight)
        data['tareWeightTime'] = slip.tare_weight_time.isoformat()
        data['netWeight'] = str(slip.net_weight)
    return data


def slip_from_dict(data: dict) -> Slip:
    """
    Rebuild a slip from its persisted form.

    Raises:
        PersistenceError: If the record is malformed or its status does
            not agree with the presence of the completion fields.
    """
    try:
        status = data['status']
        common = dict(
            id=UUID(str(data['id'])),
            slip_number=str(data['slipNumber']),
            vehicle_number=str(data['vehicleNumber']),
            material=str(data['material']),
            gross_weight=Decimal(str(data['grossWeight'])),
            gross_weight_time=datetime.fromisoformat(data['grossWeightTime']),
        )
        present = [key for key in COMPLETION_KEYS if key in data]

        if status == SlipStatus.PENDING:
            if present:
                raise PersistenceError(
                    f"Pending slip {common['slip_number']} carries {', '.join(present)}"
                )
            return PendingSlip(**common)

        if status == SlipStatus.COMPLETE:
            if len(present) != len(COMPLETION_KEYS):
                raise PersistenceError(
                    f"Complete slip {common['slip_number']} is missing completion fields"
                )
            return CompleteSlip(
                **common,
                tare_weight=Decimal(str(data['tareWeight'])),
                tare_weight_time=datetime.fromisoformat(data['tareWeightTime']),
                net_weight=Decimal(str(data['netWeight'])),
            )
    except (KeyError, TypeError, ValueError, InvalidOperation) as exc:
        raise PersistenceError(f"Malformed slip record: {exc!r}") from exc

    raise PersistenceError(f"Unknown slip status: {status!r}")
