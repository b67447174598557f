from django.urls import path
from .views import (
    hero,
    footer_settings,
    footer_link_list_create, footer_link_detail, footer_links_reorder,
    active_announcements, announcement_list_create, announcement_detail,
)

urlpatterns = [
    path('content/hero/', hero, name='hero'),

    path('footer/settings/', footer_settings, name='footer-settings'),
    path('footer/links/', footer_link_list_create, name='footer-link-list'),
    path('footer/links/reorder/', footer_links_reorder, name='footer-links-reorder'),
    path('footer/links/<int:pk>/', footer_link_detail, name='footer-link-detail'),

    path('announcements/', announcement_list_create, name='announcement-list'),
    path('announcements/active/', active_announcements, name='announcement-active'),
    path('announcements/<int:pk>/', announcement_detail, name='announcement-detail'),
]
