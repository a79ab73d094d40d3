"""
URL configuration for the autodashboard project.

Every app mounts its routes under /api/v1/.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Auto Dashboard Admin Panel"
admin.site.site_title = "Auto Dashboard Admin Portal"
admin.site.index_title = "Vehicle import and dealer management"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('autodashboard.core.urls')),
    path('api/v1/', include('autodashboard.locations.urls')),
    path('api/v1/', include('autodashboard.catalog.urls')),
    path('api/v1/', include('autodashboard.pricing.urls')),
    path('api/v1/', include('autodashboard.vehicles.urls')),
    path('api/v1/', include('autodashboard.dealers.urls')),
    path('api/v1/', include('autodashboard.balances.urls')),
    path('api/v1/', include('autodashboard.invoices.urls')),
    path('api/v1/', include('autodashboard.notifications.urls')),
    path('api/v1/', include('autodashboard.uploads.urls')),
    path('api/v1/', include('autodashboard.reports.urls')),
]
