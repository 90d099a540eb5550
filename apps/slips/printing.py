"""
Print artifact for completed slips.

A printed slip carries two identical copies headed "Weighment Slip
(Customer Copy)" and "Weighment Slip (Office Copy)", each closing with a
signature line for the authorised signatory. Weights print with three
decimals and a unit ("12.500 ton").
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List

from django.utils import timezone

from .domain import CompleteSlip
from .exceptions import InvalidStateError


COPY_TITLES = ('Customer Copy', 'Office Copy')
SIGNATORY_LABEL = 'Authorised Signatory'


def format_weight(weight: Decimal) -> str:
    return f"{weight:.3f} ton"


def format_timestamp(moment: datetime) -> str:
    """Day, full month, year and 12-hour time, e.g. '19 October 2026 at 03:45 pm'."""
    if timezone.is_aware(moment):
        moment = timezone.localtime(moment)
    meridiem = 'am' if moment.hour < 12 else 'pm'
    return f"{moment.day} {moment.strftime('%B %Y at %I:%M')} {meridiem}"


@dataclass(frozen=True)
class PrintLine:
    label: str
    value: str
    bold: bool = False


@dataclass(frozen=True)
class PrintCopy:
    title: str
    company_name: str
    address: str
    lines: List[PrintLine]
    signatory: str = SIGNATORY_LABEL

    @property
    def heading(self) -> str:
        return f"Weighment Slip ({self.title})"


def build_print_copies(slip, company) -> List[PrintCopy]:
    """
    Lay out both copies of a completed slip.

    Args:
        slip: The slip to print. Must be Complete.
        company: CompanySettings giving the issuer name and address.

    Raises:
        InvalidStateError: If the slip is still Pending.
    """
    if not isinstance(slip, CompleteSlip):
        raise InvalidStateError(f"Slip {slip.slip_number} is pending and cannot be printed.")

    lines = [
        PrintLine('Slip No.', slip.slip_number),
        PrintLine('Vehicle No.', slip.vehicle_number),
        PrintLine('Material', slip.material),
        PrintLine('Gross Weight', format_weight(slip.gross_weight)),
        PrintLine('Gross Weight Time', format_timestamp(slip.gross_weight_time)),
        PrintLine('Tare Weight', format_weight(slip.tare_weight)),
        PrintLine('Tare Weight Time', format_timestamp(slip.tare_weight_time)),
        PrintLine('Net Weight', format_weight(slip.net_weight), bold=True),
    ]
    return [
        PrintCopy(
            title=title,
            company_name=company.company_name,
            address=company.address,
            lines=lines,
        )
        for title in COPY_TITLES
    ]
