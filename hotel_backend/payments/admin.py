# payments/admin.py

from django.contrib import admin

from payments.models import Transaction, TransactionDetail


class TransactionDetailInline(admin.TabularInline):
    model = TransactionDetail
    extra = 0
    can_delete = False
    readonly_fields = (
        "booking_room",
        "service_usage",
        "base_amount",
        "discount_amount",
        "amount",
        "created_at",
    )

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "booking",
        "type",
        "method",
        "amount",
        "discount_amount",
        "occurred_at",
    )
    readonly_fields = [f.name for f in Transaction._meta.fields]
    list_filter = ("type", "method", "occurred_at")
    search_fields = ("transaction_ref", "booking__booking_code")
    inlines = [TransactionDetailInline]

    # Payments are created by the engine only
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
