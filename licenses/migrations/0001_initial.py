from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="License",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("license_key", models.CharField(max_length=100, unique=True)),
                ("product", models.CharField(default="default_product", max_length=100)),
                (
                    "device_id",
                    models.CharField(
                        blank=True,
                        help_text="Bound device, set on activation",
                        max_length=500,
                        null=True,
                    ),
                ),
                ("activated", models.BooleanField(db_index=True, default=False)),
                ("activation_date", models.DateTimeField(blank=True, null=True)),
                ("expiry_date", models.DateTimeField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("active", "Active"),
                            ("expired", "Expired"),
                            ("revoked", "Revoked"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField()),
            ],
            options={
                "db_table": "licenses",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="licenses_status_idx"),
                    models.Index(
                        fields=["product", "activated"], name="licenses_product_active_idx"
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("activated", True), ("device_id__isnull", False)),
                            models.Q(("activated", False), ("device_id__isnull", True)),
                            _connector="OR",
                        ),
                        name="license_device_bound_iff_activated",
                    ),
                ],
            },
        ),
    ]
