from django.apps import AppConfig


class SlipsConfig(AppConfig):
    """
    Configuration for the slips application.

    Builds the process-wide SlipStore once at startup. The store reads
    from its repository lazily, so no queries run during app loading.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.slips'
    label = 'slips'
    verbose_name = 'Weighbridge Slips'

    def ready(self):
        from .store import build_slip_store

        self.store = build_slip_store()
