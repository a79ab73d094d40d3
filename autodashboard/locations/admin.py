from django.contrib import admin
from .models import Country, State, City, Port


@admin.register(Country)
class CountryAdmin(admin.ModelAdmin):
    list_display = ['code', 'name_en', 'name_ka']
    search_fields = ['code', 'name_en', 'name_ka']


@admin.register(State)
class StateAdmin(admin.ModelAdmin):
    list_display = ['code', 'name_en', 'country']
    list_filter = ['country']
    search_fields = ['code', 'name_en', 'name_ka']


@admin.register(City)
class CityAdmin(admin.ModelAdmin):
    list_display = ['name', 'state']
    list_filter = ['state__country']
    search_fields = ['name']


@admin.register(Port)
class PortAdmin(admin.ModelAdmin):
    list_display = ['name', 'state', 'is_destination']
    list_filter = ['is_destination', 'state__country']
    search_fields = ['name']
