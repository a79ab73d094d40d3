from django.contrib import admin
from .models import Make, VehicleModel, Auction, Status


class VehicleModelInline(admin.TabularInline):
    model = VehicleModel
    extra = 0


@admin.register(Make)
class MakeAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']
    inlines = [VehicleModelInline]


@admin.register(VehicleModel)
class VehicleModelAdmin(admin.ModelAdmin):
    list_display = ['name', 'make']
    list_filter = ['make']
    search_fields = ['name', 'make__name']


@admin.register(Auction)
class AuctionAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(Status)
class StatusAdmin(admin.ModelAdmin):
    list_display = ['order', 'name_en', 'name_ka', 'color']
    ordering = ['order']
