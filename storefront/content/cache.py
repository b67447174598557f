"""
Caching of the public storefront content reads.

Keys are dropped whenever the underlying rows change.
"""
from django.conf import settings
from django.core.cache import cache
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging

from .models import Hero, FooterSettings, FooterLink, Announcement

logger = logging.getLogger(__name__)

HERO_KEY = 'content:hero'
FOOTER_SETTINGS_KEY = 'content:footer_settings'
FOOTER_LINKS_KEY = 'content:footer_links'
ANNOUNCEMENTS_KEY_PREFIX = 'content:announcements:'

PLATFORMS = ('web', 'mobile', 'both', 'all')


def get_announcements_cache_key(platform='all'):
    return f"{ANNOUNCEMENTS_KEY_PREFIX}{platform}"


def get_cached(key):
    return cache.get(key)


def set_cached(key, data):
    cache.set(key, data, settings.STOREFRONT_CONTENT_CACHE_TTL)


@receiver([post_save, post_delete], sender=Hero)
def invalidate_hero_cache(sender, instance, **kwargs):
    cache.delete(HERO_KEY)
    logger.debug(f"Invalidated hero cache after change to hero {instance.pk}")


@receiver([post_save, post_delete], sender=FooterSettings)
def invalidate_footer_settings_cache(sender, instance, **kwargs):
    cache.delete(FOOTER_SETTINGS_KEY)


@receiver([post_save, post_delete], sender=FooterLink)
def invalidate_footer_links_cache(sender, instance, **kwargs):
    cache.delete(FOOTER_LINKS_KEY)


@receiver([post_save, post_delete], sender=Announcement)
def invalidate_announcements_cache(sender, instance, **kwargs):
    cache.delete_many([get_announcements_cache_key(platform) for platform in PLATFORMS])
