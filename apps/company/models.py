from django.db import models


class CompanySettingsRecord(models.Model):
    """Singleton row holding the issuer identity printed on slips."""

    SINGLETON_ID = 1

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_ID, editable=False)
    company_name = models.CharField(max_length=200, blank=True)
    address = models.TextField(blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'company_settings'
        verbose_name = 'company settings'
        verbose_name_plural = 'company settings'

    def __str__(self):
        return self.company_name or '(unnamed company)'
