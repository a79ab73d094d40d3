from django.contrib import admin
from .models import BalanceRequest, Transaction


@admin.register(BalanceRequest)
class BalanceRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'dealer', 'amount', 'status', 'processed_by', 'processed_at', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['dealer__name', 'dealer__email', 'dealer__company_name']
    readonly_fields = ['processed_at', 'processed_by']


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ['dealer', 'type', 'amount', 'balance_after', 'reference_type', 'reference_id', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['dealer__name', 'dealer__email', 'description']

    def has_change_permission(self, request, obj=None):
        return False
