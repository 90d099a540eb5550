import pytest
from django.apps import apps
from rest_framework.test import APIClient

from apps.company.store import SettingsStore
from .fakes import PLACEHOLDER, InMemorySettingsRepository


@pytest.fixture
def repository():
    return InMemorySettingsRepository()


@pytest.fixture
def settings_store(repository, monkeypatch):
    """In-memory SettingsStore installed as the process-wide store."""
    store = SettingsStore(repository, defaults=PLACEHOLDER)
    monkeypatch.setattr(apps.get_app_config('company'), 'store', store)
    return store


@pytest.fixture
def api_client():
    return APIClient()
