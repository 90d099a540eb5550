from django.apps import AppConfig


class CompanyConfig(AppConfig):
    """Builds the process-wide SettingsStore once at startup."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.company'
    label = 'company'
    verbose_name = 'Company Settings'

    def ready(self):
        from .store import build_settings_store

        self.store = build_settings_store()
