"""
Settings Store - the issuer identity printed on slips.

One record, `CompanySettings(company_name, address)`, replaced as a whole
on every save. When nothing has been saved yet, `get()` returns the
configured placeholder identity.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from django.apps import apps
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError, transaction

from apps.slips.exceptions import PersistenceError, ValidationError
from apps.slips.repositories import read_json_file, write_json_file


logger = logging.getLogger(__name__)

SETTINGS_FILENAME = 'settings.json'


@dataclass(frozen=True)
class CompanySettings:
    company_name: str
    address: str

    def to_dict(self) -> dict:
        return {'companyName': self.company_name, 'address': self.address}

    @classmethod
    def from_dict(cls, data) -> 'CompanySettings':
        """
        Build settings from `{companyName, address}`.

        Both keys must be present and hold strings; empty strings are allowed.

        Raises:
            ValidationError: If a field is missing or not a string.
        """
        if not isinstance(data, dict):
            raise ValidationError("Settings must be an object with companyName and address.")
        for key in ('companyName', 'address'):
            if key not in data:
                raise ValidationError(f"Settings field '{key}' is required.")
            if not isinstance(data[key], str):
                raise ValidationError(f"Settings field '{key}' must be a string.")
        return cls(company_name=data['companyName'].strip(), address=data['address'].strip())


def default_company_settings() -> CompanySettings:
    return CompanySettings(
        company_name=settings.WEIGHBRIDGE_DEFAULT_COMPANY_NAME,
        address=settings.WEIGHBRIDGE_DEFAULT_ADDRESS,
    )


# =============================================================================
# Repositories
# =============================================================================

class SettingsRepository(Protocol):
    shared: bool

    def load(self) -> Optional[CompanySettings]: ...

    def save(self, company: CompanySettings) -> None: ...


class JsonFileSettingsRepository:
    shared = False

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Optional[CompanySettings]:
        data = read_json_file(self.path, default=None)
        if data is None:
            return None
        try:
            return CompanySettings.from_dict(data)
        except ValidationError as exc:
            raise PersistenceError(f"{self.path.name} is malformed: {exc}") from exc

    def save(self, company: CompanySettings) -> None:
        write_json_file(self.path, company.to_dict())


class DatabaseSettingsRepository:
    """Singleton settings row, written by any process."""

    shared = True

    def load(self) -> Optional[CompanySettings]:
        from .models import CompanySettingsRecord

        try:
            record = CompanySettingsRecord.objects.filter(pk=CompanySettingsRecord.SINGLETON_ID).first()
        except DatabaseError as exc:
            raise PersistenceError(f"Cannot load settings: {exc}") from exc
        if record is None:
            return None
        return CompanySettings(company_name=record.company_name, address=record.address)

    def save(self, company: CompanySettings) -> None:
        from .models import CompanySettingsRecord

        try:
            with transaction.atomic():
                CompanySettingsRecord.objects.update_or_create(
                    pk=CompanySettingsRecord.SINGLETON_ID,
                    defaults={
                        'company_name': company.company_name,
                        'address': company.address,
                    },
                )
        except DatabaseError as exc:
            raise PersistenceError(f"Cannot save settings: {exc}") from exc


# =============================================================================
# Store
# =============================================================================

class SettingsStore:
    """
    Holds the current CompanySettings behind a lock.

    A shared repository is read on every `get`, so a save made by another
    process is visible at once.

    Args:
        repository: Persistence adapter with `load()` and `save(settings)`.
        defaults: Identity returned before anything is saved, and used to
            fill blank fields when rendering.
    """

    def __init__(self, repository: SettingsRepository, defaults: CompanySettings) -> None:
        self._repository = repository
        self._defaults = defaults
        self._lock = threading.Lock()
        self._current: Optional[CompanySettings] = None

    @property
    def defaults(self) -> CompanySettings:
        return self._defaults

    def get(self) -> CompanySettings:
        with self._lock:
            if self._current is None or self._repository.shared:
                self._current = self._repository.load() or self._defaults
            return self._current

    def save(self, data) -> CompanySettings:
        """
        Replace the settings record.

        Args:
            data: CompanySettings, or a dict with `companyName` and `address`.

        Raises:
            ValidationError: If a field is missing or not a string.
            PersistenceError: If the write fails. Previous settings are kept.
        """
        company = data if isinstance(data, CompanySettings) else CompanySettings.from_dict(data)
        with self._lock:
            self._repository.save(company)
            self._current = company
        logger.info("Saved company settings for %r", company.company_name)
        return company

    def for_rendering(self) -> CompanySettings:
        """Current settings with blank fields filled from the defaults."""
        current = self.get()
        return CompanySettings(
            company_name=current.company_name or self._defaults.company_name,
            address=current.address or self._defaults.address,
        )


def build_settings_repository() -> SettingsRepository:
    backend = settings.WEIGHBRIDGE_STORAGE
    if backend == 'database':
        return DatabaseSettingsRepository()
    if backend == 'json':
        return JsonFileSettingsRepository(Path(settings.WEIGHBRIDGE_DATA_DIR) / SETTINGS_FILENAME)
    raise ImproperlyConfigured(
        f"Unknown WEIGHBRIDGE_STORAGE {backend!r}. Valid options: database, json"
    )


def build_settings_store() -> SettingsStore:
    return SettingsStore(build_settings_repository(), defaults=default_company_settings())


def get_settings_store() -> SettingsStore:
    """The process-wide store built by the company app at startup."""
    return apps.get_app_config('company').store
