from django.contrib import admin
from .models import Invoice, InvoiceItem


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0
    raw_id_fields = ['vehicle']


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'dealer', 'total_amount', 'status', 'paid_from_balance', 'paid_at', 'created_at']
    list_filter = ['status', 'paid_from_balance', 'created_at']
    search_fields = ['invoice_number', 'dealer__name', 'dealer__email']
    readonly_fields = ['invoice_number', 'paid_at']
    inlines = [InvoiceItemInline]
