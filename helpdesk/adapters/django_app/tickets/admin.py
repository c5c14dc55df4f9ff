"""
Django Admin para o domínio de Tickets.

Configuração do admin para consulta e triagem de tickets via interface web.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import TicketModel


STATUS_COLORS = {
    'OPEN': '#17a2b8',
    'IN_PROGRESS': '#ffc107',
    'ON_HOLD': '#6c757d',
    'CANCELLED': '#343a40',
    'CLOSED': '#28a745',
}

PRIORITY_COLORS = {
    'LOW': '#16a34a',
    'MEDIUM': '#ea580c',
    'HIGH': '#dc2626',
}


def _badge(color: str, text: str):
    return format_html(
        '<span style="background-color: {}; color: white; padding: 3px 8px; '
        'border-radius: 3px; font-size: 11px;">{}</span>',
        color,
        text,
    )


@admin.register(TicketModel)
class TicketAdmin(admin.ModelAdmin):
    """Admin para TicketModel."""

    list_display = [
        'id',
        'subject',
        'department',
        'status_badge',
        'priority_badge',
        'created_by',
        'created_at',
    ]

    list_filter = [
        'department',
        'status',
        'priority',
        'created_at',
    ]

    search_fields = [
        'subject',
        'description',
        'created_by__username',
    ]

    readonly_fields = [
        'id',
        'created_by',
        'attachments',
        'created_at',
        'updated_at',
    ]

    fieldsets = [
        ('Identificação', {
            'fields': ['id', 'subject', 'description', 'attachments'],
        }),
        ('Classificação', {
            'fields': ['department', 'category', 'subcategory'],
        }),
        ('Status', {
            'fields': ['status', 'priority'],
        }),
        ('Responsáveis', {
            'fields': ['created_by'],
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse'],
        }),
    ]

    ordering = ['-created_at']

    date_hierarchy = 'created_at'

    list_select_related = ['created_by']

    @admin.display(description='Status')
    def status_badge(self, obj):
        return _badge(STATUS_COLORS.get(obj.status, '#6c757d'), obj.get_status_display())

    @admin.display(description='Priority')
    def priority_badge(self, obj):
        return _badge(PRIORITY_COLORS.get(obj.priority, '#6c757d'), obj.get_priority_display())
