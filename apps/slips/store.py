"""
Slip Store - the single writer of the slip collection.

The store holds the current slips as a tuple of immutable domain objects
and exposes two mutations, `create` and `complete`. Both run under one
lock, build the next collection, hand the change to the repository and
only then swap it in, so a failed write leaves the visible state untouched.

A shared repository (the database) is reloaded before every operation,
so numbering starts from the committed maximum and a slip completed by
another process is seen as Complete. The repository itself rejects a
duplicate number or a second completion that slips through between the
reload and the write.

Example:
    Weighing a truck in and out::

        store = SlipStore(JsonFileSlipRepository(Path('data/slips.json')))

        slip = store.create('mh12ab1234', 'Sand', '12.500')
        # slip.slip_number == '00001', slip.vehicle_number == 'MH12AB1234'

        slip = store.complete(slip.id, '4.200')
        # slip.net_weight == Decimal('8.300')
"""

import logging
import threading
from typing import Callable, Optional, Tuple
from uuid import UUID

from django.apps import apps
from django.utils import timezone

from .domain import CompleteSlip, PendingSlip, Slip, SlipStatus, next_slip_number
from .exceptions import InvalidStateError, NotFoundError, PersistenceError
from .repositories import SlipRepository, build_slip_repository


logger = logging.getLogger(__name__)


class SlipStore:
    """
    Owns the slip collection and enforces the slip lifecycle.

    State is loaded lazily from the repository on first use, and again on
    every call when the repository is shared. Reads return tuples of
    frozen slips, so callers cannot mutate the store's state.

    Args:
        repository: Persistence adapter with `load()` and `save(slips)`.
        clock: Returns the current aware datetime. Defaults to
            `django.utils.timezone.now`.
    """

    def __init__(self, repository: SlipRepository, *, clock: Callable = timezone.now) -> None:
        self._repository = repository
        self._clock = clock
        self._lock = threading.Lock()
        self._slips: Optional[Tuple[Slip, ...]] = None

    # -------- Queries --------

    def list(self) -> Tuple[Slip, ...]:
        """All slips in creation order."""
        with self._lock:
            return self._loaded()

    def list_pending(self) -> Tuple[PendingSlip, ...]:
        return tuple(slip for slip in self.list() if slip.status == SlipStatus.PENDING)

    def list_complete(self) -> Tuple[CompleteSlip, ...]:
        return tuple(slip for slip in self.list() if slip.status == SlipStatus.COMPLETE)

    def get(self, slip_id) -> Slip:
        """
        Raises:
            NotFoundError: If no slip has this id.
        """
        with self._lock:
            _, slip = self._find(self._loaded(), slip_id)
            return slip

    def next_slip_number(self) -> str:
        """Number the next `create` call would allocate."""
        with self._lock:
            return next_slip_number(self._loaded())

    def counts(self) -> dict:
        slips = self.list()
        pending = sum(1 for slip in slips if slip.status == SlipStatus.PENDING)
        return {
            'pending': pending,
            'complete': len(slips) - pending,
        }

    # -------- Mutations --------

    def create(self, vehicle_number, material, gross_weight) -> PendingSlip:
        """
        Open a new Pending slip with the next slip number.

        Returns:
            The new PendingSlip.

        Raises:
            ValidationError: If vehicle number or material is blank or the
                gross weight is not a positive finite number.
            PersistenceError: If the repository write fails. No slip is added.
        """
        with self._lock:
            slips = self._loaded()
            slip = PendingSlip.open(
                slip_number=next_slip_number(slips),
                vehicle_number=vehicle_number,
                material=material,
                gross_weight=gross_weight,
                at=self._clock(),
            )
            self._commit(self._repository.insert, slip, slips + (slip,))

        logger.info(
            "Created slip %s for vehicle %s (gross %s ton)",
            slip.slip_number, slip.vehicle_number, slip.gross_weight,
        )
        return slip

    def complete(self, slip_id, tare_weight) -> CompleteSlip:
        """
        Record the tare weight of a Pending slip.

        Completion is not idempotent: a second call for the same slip
        raises InvalidStateError and leaves the first result intact.

        Returns:
            The CompleteSlip, with net weight = |gross - tare|.

        Raises:
            NotFoundError: If no slip has this id.
            InvalidStateError: If the slip is already Complete.
            ValidationError: If the tare weight is not a positive finite number.
            PersistenceError: If the repository write fails. The slip stays Pending.
        """
        with self._lock:
            slips = self._loaded()
            index, slip = self._find(slips, slip_id)
            if not isinstance(slip, PendingSlip):
                logger.warning("Rejected completion of slip %s: already complete", slip.slip_number)
                raise InvalidStateError(f"Slip {slip.slip_number} is already complete.")

            completed = slip.complete(tare_weight, at=self._clock())
            self._commit(
                self._repository.mark_complete,
                completed,
                slips[:index] + (completed,) + slips[index + 1:],
            )

        logger.info(
            "Completed slip %s for vehicle %s (net %s ton)",
            completed.slip_number, completed.vehicle_number, completed.net_weight,
        )
        return completed

    # -------- Internals (caller holds _lock) --------

    def _loaded(self) -> Tuple[Slip, ...]:
        if self._slips is None or self._repository.shared:
            self._slips = tuple(self._repository.load())
            logger.debug("Loaded %d slips", len(self._slips))
        return self._slips

    def _commit(self, write: Callable, slip: Slip, slips: Tuple[Slip, ...]) -> None:
        try:
            write(slip, slips)
        except InvalidStateError:
            logger.warning("Rejected completion of slip %s: completed elsewhere", slip.slip_number)
            raise
        except PersistenceError:
            logger.exception("Write of slip %s failed; store left unchanged", slip.slip_number)
            raise
        self._slips = slips

    @staticmethod
    def _find(slips, slip_id) -> Tuple[int, Slip]:
        try:
            wanted = slip_id if isinstance(slip_id, UUID) else UUID(str(slip_id))
        except ValueError:
            raise NotFoundError(f"Slip {slip_id} not found.")

        for index, slip in enumerate(slips):
            if slip.id == wanted:
                return index, slip
        raise NotFoundError(f"Slip {slip_id} not found.")


def build_slip_store() -> SlipStore:
    """Create a store backed by the configured repository."""
    return SlipStore(build_slip_repository())


def get_slip_store() -> SlipStore:
    """The process-wide store built by the slips app at startup."""
    return apps.get_app_config('slips').store
