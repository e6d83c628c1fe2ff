from django.contrib import admin
from solo.admin import SingletonModelAdmin
from unfold.admin import ModelAdmin

from . import models


@admin.register(models.SiteSettings)
class SiteSettingsAdmin(SingletonModelAdmin, ModelAdmin):  # type: ignore[misc]
    readonly_fields = ["created_at", "updated_at"]
    fieldsets = (
        ("Emails", {"fields": ("live_emails", "internal_catchall_email")}),
        ("URLs", {"fields": ("frontend_base_url",)}),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )


@admin.register(models.EmailLog)
class EmailLogAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["to", "subject", "sent_at"]
    search_fields = ["to", "subject"]
    readonly_fields = ["to", "subject", "sent_at", "body", "html"]
    exclude = ["compressed_body", "compressed_html"]
