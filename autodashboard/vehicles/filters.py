import django_filters
from django.db.models import Q

from autodashboard.core.utils import parse_bool
from .models import Vehicle


class VehicleFilter(django_filters.FilterSet):
    """
    Vehicle list filters. show_archived selects archived vehicles instead
    of active ones; without it only active vehicles are listed.
    """
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.NumberFilter(field_name='status_id', lookup_expr='exact')
    dealer = django_filters.NumberFilter(field_name='dealer_id', lookup_expr='exact')
    make = django_filters.NumberFilter(field_name='make_id', lookup_expr='exact')
    year = django_filters.NumberFilter(field_name='year', lookup_expr='exact')
    port = django_filters.NumberFilter(field_name='port_id', lookup_expr='exact')

    class Meta:
        model = Vehicle
        fields = ['search', 'status', 'dealer', 'make', 'year', 'port']

    def filter_search(self, queryset, name, value):
        """Case-insensitive match on VIN or lot number"""
        search = (value or '').strip()
        if not search:
            return queryset
        return queryset.filter(Q(vin__icontains=search) | Q(lot_number__icontains=search))

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        return queryset.filter(is_archived=parse_bool(self.data.get('show_archived')))


class DealerVehicleFilter(VehicleFilter):
    """Same filters without dealer and port; the queryset is already scoped"""
    dealer = None
    port = None

    class Meta:
        model = Vehicle
        fields = ['search', 'status', 'make', 'year']
