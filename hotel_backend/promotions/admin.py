# promotions/admin.py

from django.contrib import admin

from promotions.models import CustomerPromotion, Promotion, UsedPromotion


@admin.register(Promotion)
class PromotionAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "type",
        "scope",
        "value",
        "remaining_qty",
        "start_date",
        "end_date",
        "disabled_at",
    )
    list_filter = ("type", "scope")
    search_fields = ("code", "description")


@admin.register(CustomerPromotion)
class CustomerPromotionAdmin(admin.ModelAdmin):
    list_display = ("customer", "promotion", "status", "claimed_at", "used_at")
    list_filter = ("status",)
    search_fields = ("promotion__code", "customer__full_name")
    raw_id_fields = ("customer", "promotion", "transaction_detail")


@admin.register(UsedPromotion)
class UsedPromotionAdmin(admin.ModelAdmin):
    list_display = ("promotion", "discount_amount", "transaction", "created_at")
    readonly_fields = [f.name for f in UsedPromotion._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
