from django.contrib import admin
from .models import Vehicle, VehiclePhoto, VehicleStatusHistory, VehicleComment


class VehiclePhotoInline(admin.TabularInline):
    model = VehiclePhoto
    extra = 0


class VehicleStatusHistoryInline(admin.TabularInline):
    model = VehicleStatusHistory
    extra = 0
    readonly_fields = ['status', 'changed_by', 'changed_at']
    can_delete = False


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ['vin', 'year', 'make', 'model', 'dealer', 'status', 'is_archived', 'created_at']
    list_filter = ['status', 'is_archived', 'make', 'damage_type']
    search_fields = ['vin', 'lot_number', 'dealer__name', 'dealer__email']
    raw_id_fields = ['dealer']
    inlines = [VehiclePhotoInline, VehicleStatusHistoryInline]


@admin.register(VehicleComment)
class VehicleCommentAdmin(admin.ModelAdmin):
    list_display = ['vehicle', 'user', 'created_at']
    search_fields = ['vehicle__vin', 'content']
