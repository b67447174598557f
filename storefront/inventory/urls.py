from django.urls import path
from .views import (
    inventory_list_create, inventory_detail, inventory_history,
    low_stock, inventory_bulk_update,
    inventory_export, inventory_import,
)

urlpatterns = [
    path('inventory/', inventory_list_create, name='inventory-list'),
    path('inventory/low-stock/', low_stock, name='inventory-low-stock'),
    path('inventory/bulk/', inventory_bulk_update, name='inventory-bulk-update'),
    path('inventory/export/', inventory_export, name='inventory-export'),
    path('inventory/import/', inventory_import, name='inventory-import'),
    path('inventory/<int:pk>/', inventory_detail, name='inventory-detail'),
    path('inventory/<int:pk>/history/', inventory_history, name='inventory-history'),
]
