"""
Django admin configuration for licenses app.

Operators revoke or expire licenses here; the API never changes status
except on activation.
"""
from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import License


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "license_key",
        "product",
        "status_display",
        "activated",
        "device_id",
        "activation_date",
        "expiry_date",
        "created_at",
    ]
    list_filter = ["status", "activated", "product", "created_at"]
    search_fields = ["license_key", "device_id", "product"]
    readonly_fields = [
        "license_key",
        "device_id",
        "activated",
        "activation_date",
        "created_at",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("license_key", "product", "status"),
            },
        ),
        (
            "Device Binding",
            {
                "fields": ("activated", "device_id", "activation_date"),
            },
        ),
        (
            "Expiration",
            {
                "fields": ("expiry_date",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at",),
                "classes": ("collapse",),
            },
        ),
    )
    actions = ["revoke_licenses"]

    def has_add_permission(self, request):
        """Keys are only issued through the API or the issue_license command."""
        return False

    def status_display(self, obj):
        """Display status with color coding."""
        colors = {
            "pending": "gray",
            "active": "green",
            "expired": "orange",
            "revoked": "red",
        }
        color = colors.get(obj.status, "black")
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color,
            obj.status.upper(),
        )

    status_display.short_description = "Status"

    @admin.action(description="Revoke selected licenses")
    def revoke_licenses(self, request, queryset):
        """Mark the selected licenses as revoked."""
        updated = queryset.update(status="revoked")
        self.message_user(request, f"Revoked {updated} license(s)")
