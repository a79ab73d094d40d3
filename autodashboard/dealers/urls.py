from django.urls import path
from .views import dealer_list_create, dealer_detail, dealer_toggle_status

urlpatterns = [
    path('dealers/', dealer_list_create, name='dealer-list-create'),
    path('dealers/<int:pk>/', dealer_detail, name='dealer-detail'),
    path('dealers/<int:pk>/toggle-status/', dealer_toggle_status, name='dealer-toggle-status'),
]
