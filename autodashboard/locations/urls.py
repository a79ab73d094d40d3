from django.urls import path
from .views import (
    country_list_create, country_detail,
    state_list_create, state_detail,
    city_list_create, city_detail,
    port_list_create, port_detail,
    states_by_country, cities_by_state, ports_by_state,
    all_cities, all_ports,
)

urlpatterns = [
    path('settings/countries/', country_list_create, name='country-list-create'),
    path('settings/countries/<int:pk>/', country_detail, name='country-detail'),
    path('settings/countries/<int:country_id>/states/', states_by_country, name='states-by-country'),
    path('settings/states/', state_list_create, name='state-list-create'),
    path('settings/states/<int:pk>/', state_detail, name='state-detail'),
    path('settings/states/<int:state_id>/cities/', cities_by_state, name='cities-by-state'),
    path('settings/states/<int:state_id>/ports/', ports_by_state, name='ports-by-state'),
    path('settings/cities/', city_list_create, name='city-list-create'),
    path('settings/cities/all/', all_cities, name='all-cities'),
    path('settings/cities/<int:pk>/', city_detail, name='city-detail'),
    path('settings/ports/', port_list_create, name='port-list-create'),
    path('settings/ports/all/', all_ports, name='all-ports'),
    path('settings/ports/<int:pk>/', port_detail, name='port-detail'),
]
