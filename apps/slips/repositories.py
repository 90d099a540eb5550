"""
Slip persistence adapters.

A repository is the only thing the Slip Store knows about storage:

    load() -> list of slips, in creation order
    insert(slip, slips) -> None, store a new Pending slip
    mark_complete(slip, slips) -> None, turn a Pending slip Complete

`slips` is the whole collection after the change, for adapters that
rewrite everything at once. Every method raises PersistenceError when
the storage fails.

A repository with `shared = True` may be written by other processes, so
the store reloads it before every operation instead of caching.

Two adapters are provided:
    JsonFileSlipRepository: local JSON file (single-terminal installs).
    DatabaseSlipRepository: Django database, shared by every process.

`build_slip_repository()` picks one from the WEIGHBRIDGE_STORAGE setting.
"""

import json
import logging
import os
from pathlib import Path
from typing import List, Protocol, Sequence

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError, transaction

from .domain import CompleteSlip, PendingSlip, Slip, SlipStatus, slip_from_dict, slip_to_dict
from .exceptions import InvalidStateError, NotFoundError, PersistenceError


logger = logging.getLogger(__name__)

SLIPS_FILENAME = 'slips.json'


class SlipRepository(Protocol):
    shared: bool

    def load(self) -> List[Slip]: ...

    def insert(self, slip: PendingSlip, slips: Sequence[Slip]) -> None: ...

    def mark_complete(self, slip: CompleteSlip, slips: Sequence[Slip]) -> None: ...


def read_json_file(path: Path, default):
    """
    Read a JSON document, returning `default` when the file does not exist.

    Raises:
        PersistenceError: If the file cannot be read or is not valid JSON.
    """
    if not path.exists():
        return default
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise PersistenceError(f"Cannot read {path.name}: {exc}") from exc


def write_json_file(path: Path, data) -> None:
    """
    Write a JSON document through a temp file and an atomic rename.

    A failed write leaves the previous file contents in place.

    Raises:
        PersistenceError: If the file cannot be written.
    """
    tmp_path = path.with_name(path.name + '.tmp')
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, path)
    except OSError as exc:
        raise PersistenceError(f"Cannot write {path.name}: {exc}") from exc


class JsonFileSlipRepository:
    """Keeps the whole slip collection as a JSON array in one file."""

    shared = False

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> List[Slip]:
        data = read_json_file(self.path, default=[])
        if not isinstance(data, list):
            raise PersistenceError(f"{self.path.name} does not hold a list of slips")
        return [slip_from_dict(item) for item in data]

    def save(self, slips: Sequence[Slip]) -> None:
        write_json_file(self.path, [slip_to_dict(slip) for slip in slips])

    def insert(self, slip: PendingSlip, slips: Sequence[Slip]) -> None:
        self.save(slips)

    def mark_complete(self, slip: CompleteSlip, slips: Sequence[Slip]) -> None:
        self.save(slips)


class DatabaseSlipRepository:
    """
    Stores slips as `SlipRecord` rows, one write per slip.

    A new slip is a plain INSERT, so the unique constraint on slip_number
    rejects a number another process allocated first. Completion is a
    conditional UPDATE on `status = Pending`, so only one process can
    complete a given slip and no write ever touches other rows.
    """

    shared = True

    def load(self) -> List[Slip]:
        from .models import SlipRecord

        try:
            return [record.to_domain() for record in SlipRecord.objects.order_by('sequence')]
        except DatabaseError as exc:
            raise PersistenceError(f"Cannot load slips: {exc}") from exc

    def insert(self, slip: PendingSlip, slips: Sequence[Slip]) -> None:
        from .models import SlipRecord

        try:
            with transaction.atomic():
                SlipRecord.objects.create(**SlipRecord.field_values(slip, sequence=len(slips)))
        except DatabaseError as exc:
            raise PersistenceError(f"Cannot save slip {slip.slip_number}: {exc}") from exc

    def mark_complete(self, slip: CompleteSlip, slips: Sequence[Slip]) -> None:
        """
        Raises:
            InvalidStateError: If the row is no longer Pending.
            NotFoundError: If the row does not exist.
            PersistenceError: If the update fails.
        """
        from .models import SlipRecord

        try:
            with transaction.atomic():
                updated = SlipRecord.objects.filter(
                    id=slip.id,
                    status=SlipStatus.PENDING,
                ).update(
                    status=SlipStatus.COMPLETE,
                    tare_weight=slip.tare_weight,
                    tare_weight_time=slip.tare_weight_time,
                    net_weight=slip.net_weight,
                )
                exists = bool(updated) or SlipRecord.objects.filter(id=slip.id).exists()
        except DatabaseError as exc:
            raise PersistenceError(f"Cannot save slip {slip.slip_number}: {exc}") from exc

        if not exists:
            raise NotFoundError(f"Slip {slip.id} not found.")
        if not updated:
            raise InvalidStateError(f"Slip {slip.slip_number} is already complete.")


def build_slip_repository() -> SlipRepository:
    """Return the repository selected by settings.WEIGHBRIDGE_STORAGE."""
    backend = settings.WEIGHBRIDGE_STORAGE
    if backend == 'database':
        return DatabaseSlipRepository()
    if backend == 'json':
        path = Path(settings.WEIGHBRIDGE_DATA_DIR) / SLIPS_FILENAME
        logger.info("Using JSON slip storage at %s", path)
        return JsonFileSlipRepository(path)
    raise ImproperlyConfigured(
        f"Unknown WEIGHBRIDGE_STORAGE {backend!r}. Valid options: database, json"
    )
