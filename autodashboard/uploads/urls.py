from django.urls import path
from .views import presigned_upload, confirm_upload, import_vehicle_photo

urlpatterns = [
    path('upload/presigned/', presigned_upload, name='upload-presigned'),
    path('upload/confirm/', confirm_upload, name='upload-confirm'),
    path('upload/import-url/', import_vehicle_photo, name='upload-import-url'),
]
