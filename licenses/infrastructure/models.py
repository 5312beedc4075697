"""
License Django ORM model.

This is the infrastructure layer model for license records.
Domain entities are in licenses.domain.license.
"""
from django.db import models
from django.db.models import Q


class License(models.Model):
    """
    A license key, the product it was issued for, and the device it is
    bound to once activated.
    """

    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("active", "Active"),
        ("expired", "Expired"),
        ("revoked", "Revoked"),
    ]

    license_key = models.CharField(max_length=100, unique=True)
    product = models.CharField(max_length=100, default="default_product")
    device_id = models.CharField(
        max_length=500, null=True, blank=True, help_text="Bound device, set on activation"
    )
    activated = models.BooleanField(default=False, db_index=True)
    activation_date = models.DateTimeField(null=True, blank=True)
    expiry_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")
    created_at = models.DateTimeField()

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="licenses_status_idx"),
            models.Index(fields=["product", "activated"], name="licenses_product_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(activated=True, device_id__isnull=False)
                    | Q(activated=False, device_id__isnull=True)
                ),
                name="license_device_bound_iff_activated",
            ),
        ]

    def __str__(self):
        return self.license_key
