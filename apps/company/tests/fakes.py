"""Test doubles for the settings store."""

from apps.company.store import CompanySettings
from apps.slips.exceptions import PersistenceError


PLACEHOLDER = CompanySettings(company_name='My Weighbridge', address='123 Main St, Anytown')


class InMemorySettingsRepository:
    def __init__(self, company=None, shared=False):
        self.company = company
        self.shared = shared
        self.fail_saves = False

    def load(self):
        return self.company

    def save(self, company):
        if self.fail_saves:
            raise PersistenceError("disk full")
        self.company = company
