"""Quote admin."""

from django.contrib import admin

from pressman.models import Quote


@admin.register(Quote)
class QuoteAdmin(admin.ModelAdmin):
    """Recorded quotes are immutable; the admin only displays them."""

    list_display = [
        "uuid",
        "product_id",
        "book_size",
        "quantity",
        "unit_price_q",
        "total_price_q",
        "override_applied",
        "created_at",
    ]
    list_filter = ["product_id", "override_applied"]
    search_fields = ["uuid", "product_id"]
    ordering = ["-created_at"]
    date_hierarchy = "created_at"

    fieldsets = [
        (None, {"fields": ("uuid", "product_id", "book_size")}),
        ("Pricing", {"fields": ("quantity", "unit_price_q", "total_price_q", "override_applied")}),
        ("Snapshot", {"fields": ("selection", "breakdown")}),
        ("Audit", {"fields": ("created_at", "updated_at")}),
    ]

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
