from django.contrib import admin

from .models import CompanySettingsRecord


@admin.register(CompanySettingsRecord)
class CompanySettingsRecordAdmin(admin.ModelAdmin):
    """Read-only; settings are saved through the settings API."""

    list_display = ['company_name', 'address', 'updated_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
