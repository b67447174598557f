from django.urls import path
from .views import (
    zone_list_create, zone_detail, zone_rates,
    rate_list_create, rate_detail,
    calculate_shipping,
)

urlpatterns = [
    path('shipping/zones/', zone_list_create, name='shipping-zone-list'),
    path('shipping/zones/<int:pk>/', zone_detail, name='shipping-zone-detail'),
    path('shipping/zones/<int:pk>/rates/', zone_rates, name='shipping-zone-rates'),
    path('shipping/rates/', rate_list_create, name='shipping-rate-list'),
    path('shipping/rates/<int:pk>/', rate_detail, name='shipping-rate-detail'),
    path('shipping/calculate/', calculate_shipping, name='shipping-calculate'),
]
