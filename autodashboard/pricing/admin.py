from django.contrib import admin
from .models import TowingPrice, ShippingPrice, InsurancePrice


@admin.register(TowingPrice)
class TowingPriceAdmin(admin.ModelAdmin):
    list_display = ['city', 'port', 'price', 'updated_at']
    list_filter = ['port']
    search_fields = ['city__name', 'port__name']


@admin.register(ShippingPrice)
class ShippingPriceAdmin(admin.ModelAdmin):
    list_display = ['origin_port', 'destination_port', 'price', 'updated_at']
    list_filter = ['destination_port']


@admin.register(InsurancePrice)
class InsurancePriceAdmin(admin.ModelAdmin):
    list_display = ['min_value', 'max_value', 'price', 'updated_at']
