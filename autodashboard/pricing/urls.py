from django.urls import path
from .views import (
    towing_price_list_create, towing_price_detail,
    shipping_price_list_create, shipping_price_detail,
    insurance_price_list_create, insurance_price_detail,
    calculator_countries, calculator_states, calculator_cities, calculator_ports, calculator_calculate,
)

urlpatterns = [
    path('settings/towing-prices/', towing_price_list_create, name='towing-price-list-create'),
    path('settings/towing-prices/<int:pk>/', towing_price_detail, name='towing-price-detail'),
    path('settings/shipping-prices/', shipping_price_list_create, name='shipping-price-list-create'),
    path('settings/shipping-prices/<int:pk>/', shipping_price_detail, name='shipping-price-detail'),
    path('settings/insurance-prices/', insurance_price_list_create, name='insurance-price-list-create'),
    path('settings/insurance-prices/<int:pk>/', insurance_price_detail, name='insurance-price-detail'),

    # Public calculator
    path('calculator/countries/', calculator_countries, name='calculator-countries'),
    path('calculator/states/', calculator_states, name='calculator-states'),
    path('calculator/cities/', calculator_cities, name='calculator-cities'),
    path('calculator/ports/', calculator_ports, name='calculator-ports'),
    path('calculator/calculate/', calculator_calculate, name='calculator-calculate'),
]
