from django.urls import path
from .views import (
    vehicle_list_create, vehicle_detail, vehicle_filter_options, vehicle_form_options,
    vehicle_change_status, vehicle_archive, vehicle_restore, vehicle_add_comment, vehicle_photo_delete,
    dealer_vehicle_list, dealer_vehicle_filter_options, dealer_vehicle_detail, dealer_vehicle_add_comment,
)

urlpatterns = [
    # Admin
    path('vehicles/', vehicle_list_create, name='vehicle-list-create'),
    path('vehicles/filter-options/', vehicle_filter_options, name='vehicle-filter-options'),
    path('vehicles/form-options/', vehicle_form_options, name='vehicle-form-options'),
    path('vehicles/<int:pk>/', vehicle_detail, name='vehicle-detail'),
    path('vehicles/<int:pk>/status/', vehicle_change_status, name='vehicle-change-status'),
    path('vehicles/<int:pk>/archive/', vehicle_archive, name='vehicle-archive'),
    path('vehicles/<int:pk>/restore/', vehicle_restore, name='vehicle-restore'),
    path('vehicles/<int:pk>/comments/', vehicle_add_comment, name='vehicle-add-comment'),
    path('vehicles/<int:pk>/photos/<int:photo_id>/', vehicle_photo_delete, name='vehicle-photo-delete'),

    # Dealer
    path('dealer/vehicles/', dealer_vehicle_list, name='dealer-vehicle-list'),
    path('dealer/vehicles/filter-options/', dealer_vehicle_filter_options, name='dealer-vehicle-filter-options'),
    path('dealer/vehicles/<int:pk>/', dealer_vehicle_detail, name='dealer-vehicle-detail'),
    path('dealer/vehicles/<int:pk>/comments/', dealer_vehicle_add_comment, name='dealer-vehicle-add-comment'),
]
