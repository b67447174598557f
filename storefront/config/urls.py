"""
URL configuration for the storefront backend.

Every app mounts its routes under /api/v1/.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Storefront Admin Panel"
admin.site.site_title = "Storefront Admin Portal"
admin.site.index_title = "Store content, shipping and inventory"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('storefront.core.urls')),
    path('api/v1/', include('storefront.catalog.urls')),
    path('api/v1/', include('storefront.shipping.urls')),
    path('api/v1/', include('storefront.content.urls')),
    path('api/v1/', include('storefront.inventory.urls')),
]
