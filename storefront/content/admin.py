from django.contrib import admin
from .models import Hero, FooterSettings, FooterLink, Announcement


@admin.register(Hero)
class HeroAdmin(admin.ModelAdmin):
    list_display = ['title', 'is_active', 'updated_at']
    list_filter = ['is_active']


@admin.register(FooterSettings)
class FooterSettingsAdmin(admin.ModelAdmin):
    list_display = ['email', 'phone', 'updated_at']

    def has_add_permission(self, request):
        return not FooterSettings.objects.exists()


@admin.register(FooterLink)
class FooterLinkAdmin(admin.ModelAdmin):
    list_display = ['name', 'section', 'order', 'is_active']
    list_filter = ['section', 'is_active']
    ordering = ['section', 'order']


@admin.register(Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display = ['text', 'platform', 'is_active', 'order']
    list_filter = ['is_active', 'platform']
    search_fields = ['text']
