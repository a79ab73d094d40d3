from django.urls import path
from .views import (
    make_list_create, make_detail,
    model_list_create, model_detail, models_by_make,
    auction_list_create, auction_detail,
    status_list_create, status_detail, status_reorder,
)

urlpatterns = [
    path('settings/makes/', make_list_create, name='make-list-create'),
    path('settings/makes/<int:pk>/', make_detail, name='make-detail'),
    path('settings/makes/<int:make_id>/models/', models_by_make, name='models-by-make'),
    path('settings/models/', model_list_create, name='model-list-create'),
    path('settings/models/<int:pk>/', model_detail, name='model-detail'),
    path('settings/auctions/', auction_list_create, name='auction-list-create'),
    path('settings/auctions/<int:pk>/', auction_detail, name='auction-detail'),
    path('settings/statuses/', status_list_create, name='status-list-create'),
    path('settings/statuses/reorder/', status_reorder, name='status-reorder'),
    path('settings/statuses/<int:pk>/', status_detail, name='status-detail'),
]
