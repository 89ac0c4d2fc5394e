import uuid

import django.core.validators
import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Quote",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("uuid", models.UUIDField(default=uuid.uuid4, editable=False, unique=True, verbose_name="UUID")),
                ("product_id", models.CharField(db_index=True, max_length=100, verbose_name="product")),
                ("book_size", models.CharField(max_length=100, verbose_name="book size")),
                ("selection", models.JSONField(default=dict, verbose_name="selection")),
                ("breakdown", models.JSONField(default=dict, verbose_name="price breakdown")),
                ("quantity", models.PositiveIntegerField(verbose_name="quantity")),
                (
                    "unit_price_q",
                    models.BigIntegerField(
                        help_text="Unit price in minor currency units",
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="unit price",
                    ),
                ),
                (
                    "total_price_q",
                    models.BigIntegerField(
                        help_text="Total price in minor currency units",
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="total price",
                    ),
                ),
                (
                    "override_applied",
                    models.BooleanField(
                        db_index=True,
                        default=False,
                        help_text="Unit price was set manually",
                        verbose_name="manual price",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "quote",
                "verbose_name_plural": "quotes",
                "ordering": ["-created_at"],
                "permissions": [("override_quote_price", "Can override the quoted unit price")],
            },
        ),
        migrations.CreateModel(
            name="HistoricalQuote",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("uuid", models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, verbose_name="UUID")),
                ("product_id", models.CharField(db_index=True, max_length=100, verbose_name="product")),
                ("book_size", models.CharField(max_length=100, verbose_name="book size")),
                ("selection", models.JSONField(default=dict, verbose_name="selection")),
                ("breakdown", models.JSONField(default=dict, verbose_name="price breakdown")),
                ("quantity", models.PositiveIntegerField(verbose_name="quantity")),
                (
                    "unit_price_q",
                    models.BigIntegerField(
                        help_text="Unit price in minor currency units",
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="unit price",
                    ),
                ),
                (
                    "total_price_q",
                    models.BigIntegerField(
                        help_text="Total price in minor currency units",
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="total price",
                    ),
                ),
                (
                    "override_applied",
                    models.BooleanField(
                        db_index=True,
                        default=False,
                        help_text="Unit price was set manually",
                        verbose_name="manual price",
                    ),
                ),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="updated at")),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                (
                    "history_type",
                    models.CharField(
                        choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")],
                        max_length=1,
                    ),
                ),
                (
                    "history_user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "historical quote",
                "verbose_name_plural": "historical quotes",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
