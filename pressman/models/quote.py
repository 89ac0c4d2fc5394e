"""Quote model."""

import uuid as uuid_lib

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords


class QuoteQuerySet(models.QuerySet):
    """Custom QuerySet for Quote."""

    def for_product(self, product_id: str):
        return self.filter(product_id=product_id)

    def overridden(self):
        """Quotes whose unit price was set manually."""
        return self.filter(override_applied=True)


class Quote(models.Model):
    """
    Accepted selection and its price breakdown, stored verbatim.

    The breakdown is never recomputed from the selection; it is what the
    customer was quoted at the time.
    """

    uuid = models.UUIDField(default=uuid_lib.uuid4, editable=False, unique=True, verbose_name=_("UUID"))

    product_id = models.CharField(_("product"), max_length=100, db_index=True)
    book_size = models.CharField(_("book size"), max_length=100)

    selection = models.JSONField(_("selection"), default=dict)
    breakdown = models.JSONField(_("price breakdown"), default=dict)

    quantity = models.PositiveIntegerField(_("quantity"))
    unit_price_q = models.BigIntegerField(
        _("unit price"),
        validators=[MinValueValidator(0)],
        help_text=_("Unit price in minor currency units"),
    )
    total_price_q = models.BigIntegerField(
        _("total price"),
        validators=[MinValueValidator(0)],
        help_text=_("Total price in minor currency units"),
    )
    override_applied = models.BooleanField(
        _("manual price"),
        default=False,
        db_index=True,
        help_text=_("Unit price was set manually"),
    )

    # Audit
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    history = HistoricalRecords()

    objects = QuoteQuerySet.as_manager()

    class Meta:
        verbose_name = _("quote")
        verbose_name_plural = _("quotes")
        ordering = ["-created_at"]
        permissions = [
            ("override_quote_price", _("Can override the quoted unit price")),
        ]

    def __str__(self):
        return f"{self.product_id} x{self.quantity} = {self.total_price_q}"

    def save(self, *args, **kwargs):
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            from pressman.signals import quote_recorded

            quote_recorded.send(sender=self.__class__, instance=self, product_id=self.product_id)

    @property
    def line_items(self) -> list[dict]:
        return self.breakdown.get("line_items", [])
