from django.contrib import admin
from django.utils.html import format_html

from .domain import SlipStatus
from .models import SlipRecord


@admin.register(SlipRecord)
class SlipRecordAdmin(admin.ModelAdmin):
    """
    Read-only admin for weighbridge slips.

    Slips are created and completed only through the SlipStore, so the
    admin offers browsing and search, nothing else.
    """

    list_display = [
        'slip_number',
        'vehicle_number',
        'material',
        'gross_weight',
        'tare_weight',
        'net_weight',
        'status_badge',
        'gross_weight_time',
    ]
    list_filter = ['status', 'gross_weight_time']
    search_fields = ['slip_number', 'vehicle_number', 'material']
    ordering = ['-sequence']

    def status_badge(self, obj):
        """Display slip status as colored badge."""
        colors = {
            SlipStatus.PENDING: ('#E5C49A', '#2C1810'),
            SlipStatus.COMPLETE: ('#6B8E5E', 'white'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
