from django.contrib import admin

from .models import AuditEvent, ExportConsent


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('id', 'action', 'object_type', 'object_id', 'user', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('object_id', 'user__username')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')


@admin.register(ExportConsent)
class ExportConsentAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'scope', 'created_at')
    search_fields = ('scope', 'rationale', 'user__username')
    readonly_fields = ('user', 'rationale', 'scope', 'created_at')
