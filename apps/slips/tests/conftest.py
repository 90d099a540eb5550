import pytest
from django.apps import apps
from rest_framework.test import APIClient

from apps.company.store import CompanySettings, DatabaseSettingsRepository, SettingsStore
from apps.slips.repositories import DatabaseSlipRepository
from apps.slips.store import SlipStore
from .fakes import FakeClock, InMemorySlipRepository


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_repository():
    return InMemorySlipRepository()


@pytest.fixture
def store(memory_repository, clock):
    """SlipStore over an in-memory repository."""
    return SlipStore(memory_repository, clock=clock)


@pytest.fixture
def pending_slip(store):
    return store.create('mh12ab1234', 'Sand', '12.500')


@pytest.fixture
def complete_slip(store, pending_slip):
    return store.complete(pending_slip.id, '4.200')


@pytest.fixture
def company():
    return CompanySettings(company_name='Shree Dharam Kanta', address='NH 48, Pune')


@pytest.fixture
def api_client():
    """Return an API client (the API has no authentication)."""
    return APIClient()


@pytest.fixture
def db_store(db, clock, monkeypatch):
    """Database-backed SlipStore installed as the process-wide store."""
    slip_store = SlipStore(DatabaseSlipRepository(), clock=clock)
    monkeypatch.setattr(apps.get_app_config('slips'), 'store', slip_store)
    return slip_store


@pytest.fixture
def db_settings_store(db, monkeypatch):
    """Database-backed SettingsStore installed as the process-wide store."""
    settings_store = SettingsStore(
        DatabaseSettingsRepository(),
        defaults=CompanySettings(company_name='My Weighbridge', address='123 Main St, Anytown'),
    )
    monkeypatch.setattr(apps.get_app_config('company'), 'store', settings_store)
    return settings_store
