import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser, AllowAny
from django.shortcuts import get_object_or_404
from django.db import transaction
from storefront.core.utils import create_audit_log, is_admin_user, error_response_data
from .models import Hero, FooterSettings, FooterLink, Announcement
from .serializers import (
    HeroSerializer, FooterSettingsSerializer, FooterLinkSerializer,
    FooterLinkReorderSerializer, AnnouncementSerializer,
)
from .cache import (
    HERO_KEY, FOOTER_SETTINGS_KEY, FOOTER_LINKS_KEY,
    get_announcements_cache_key, get_cached, set_cached,
)

logger = logging.getLogger('storefront.content')


# Hero views
@api_view(['GET', 'PUT'])
@permission_classes([AllowAny])
def hero(request):
    """
    Active hero banner.

    GET returns the newest active hero. PUT (admin) replaces it, creating
    the first hero when none exists yet.
    """
    if request.method == 'GET':
        cached_data = get_cached(HERO_KEY)
        if cached_data:
            logger.debug("Cache hit for active hero")
            return Response(cached_data)

        active = Hero.get_active()
        if active is None:
            return Response({'error': 'No active hero found'}, status=status.HTTP_404_NOT_FOUND)
        data = HeroSerializer(active).data
        set_cached(HERO_KEY, data)
        return Response(data)

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user} attempted to update hero without admin privileges")
        return Response({'error': 'Only administrators can update the hero'}, status=status.HTTP_403_FORBIDDEN)

    current = Hero.get_active()
    serializer = HeroSerializer(current, data=request.data)
    if serializer.is_valid():
        saved = serializer.save()
        action = 'update' if current else 'create'
        create_audit_log(request, action, 'Hero', saved.id, changes=serializer.data, object_name=saved.title)
        logger.info(f"Hero '{saved.title}' {action}d by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_200_OK if current else status.HTTP_201_CREATED)

    logger.warning(f"Hero validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Footer settings views
@api_view(['GET', 'PUT'])
@permission_classes([AllowAny])
def footer_settings(request):
    """Footer texts; the row is created with defaults on first read"""
    if request.method == 'GET':
        cached_data = get_cached(FOOTER_SETTINGS_KEY)
        if cached_data:
            return Response(cached_data)
        data = FooterSettingsSerializer(FooterSettings.load()).data
        set_cached(FOOTER_SETTINGS_KEY, data)
        return Response(data)

    if not is_admin_user(request.user):
        return Response({'error': 'Only administrators can update footer settings'}, status=status.HTTP_403_FORBIDDEN)

    settings_obj = FooterSettings.load()
    serializer = FooterSettingsSerializer(settings_obj, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save()
        create_audit_log(request, 'update', 'FooterSettings', settings_obj.id, changes=request.data,
                         object_name='Footer settings')
        logger.info(f"Footer settings updated by {request.user.username}")
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Footer link views
@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def footer_link_list_create(request):
    """List footer links (active only unless admin) or add one (admin)"""
    if request.method == 'GET':
        admin = is_admin_user(request.user)
        if not admin:
            cached_data = get_cached(FOOTER_LINKS_KEY)
            if cached_data is not None:
                return Response(cached_data)

        links = FooterLink.objects.all()
        if not admin:
            links = links.filter(is_active=True)
        section = request.query_params.get('section')
        if section:
            links = links.filter(section=section)
        data = FooterLinkSerializer(links, many=True).data
        if not admin and not section:
            set_cached(FOOTER_LINKS_KEY, data)
        return Response(data)

    if not is_admin_user(request.user):
        return Response({'error': 'Only administrators can add footer links'}, status=status.HTTP_403_FORBIDDEN)

    serializer = FooterLinkSerializer(data=request.data)
    if serializer.is_valid():
        link = serializer.save()
        create_audit_log(request, 'create', 'FooterLink', link.id, changes=serializer.data, object_name=link.name)
        logger.info(f"Footer link '{link.name}' added to {link.section} at position {link.order}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminUser])
def footer_link_detail(request, pk):
    """Retrieve, update or delete a footer link"""
    link = get_object_or_404(FooterLink, pk=pk)

    if request.method == 'GET':
        return Response(FooterLinkSerializer(link).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = FooterLinkSerializer(link, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'FooterLink', link.id, changes=request.data, object_name=link.name)
            logger.info(f"Footer link {pk} updated by {request.user.username}")
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    link_name = link.name
    link.delete()
    create_audit_log(request, 'delete', 'FooterLink', pk, changes={'name': link_name}, object_name=link_name)
    logger.info(f"Footer link '{link_name}' deleted by {request.user.username}")
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdminUser])
def footer_links_reorder(request):
    """
    Persist a new link order, possibly moving links between sections.

    Body: ``{"links": [{"id": 1, "order": 0, "section": "shop"}, ...]}``.
    Unknown ids or sections reject the whole request; otherwise every link
    is updated in one transaction.
    """
    serializer = FooterLinkReorderSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Footer link reorder rejected: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    entries = serializer.validated_data['links']
    links = FooterLink.objects.in_bulk([entry['id'] for entry in entries])
    unknown = [entry['id'] for entry in entries if entry['id'] not in links]
    if unknown:
        logger.warning(f"Footer link reorder rejected, unknown ids: {unknown}")
        return Response(error_response_data([f'Footer link {link_id} not found' for link_id in unknown]),
                        status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        for entry in entries:
            link = links[entry['id']]
            link.order = entry['order']
            link.section = entry['section']
            link.save(update_fields=['order', 'section', 'updated_at'])

    create_audit_log(request, 'reorder', 'FooterLink', ','.join(str(e['id']) for e in entries)[:100],
                     changes={'links': [dict(e) for e in entries]}, object_name='Footer links')
    logger.info(f"{len(entries)} footer link(s) reordered by {request.user.username}")
    return Response(FooterLinkSerializer(FooterLink.objects.all(), many=True).data)


# Announcement views
@api_view(['GET'])
@permission_classes([AllowAny])
def active_announcements(request):
    """Active announcements in display order, optionally for one platform (web or mobile)"""
    platform = request.query_params.get('platform') or 'all'
    if platform not in ('web', 'mobile', 'all'):
        return Response(error_response_data('Platform must be web or mobile'), status=status.HTTP_400_BAD_REQUEST)

    cache_key = get_announcements_cache_key(platform)
    cached_data = get_cached(cache_key)
    if cached_data is not None:
        return Response(cached_data)

    announcements = Announcement.objects.filter(is_active=True)
    if platform != 'all':
        announcements = announcements.filter(platform__in=[platform, 'both'])
    data = AnnouncementSerializer(announcements, many=True).data
    set_cached(cache_key, data)
    return Response(data)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
def announcement_list_create(request):
    """List all announcements or create one"""
    if request.method == 'GET':
        serializer = AnnouncementSerializer(Announcement.objects.all(), many=True)
        return Response(serializer.data)

    serializer = AnnouncementSerializer(data=request.data)
    if serializer.is_valid():
        announcement = serializer.save()
        create_audit_log(request, 'create', 'Announcement', announcement.id, changes=serializer.data,
                         object_name=announcement.text[:255])
        logger.info(f"Announcement {announcement.id} created by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    logger.warning(f"Announcement validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminUser])
def announcement_detail(request, pk):
    """Retrieve, update or delete an announcement"""
    announcement = get_object_or_404(Announcement, pk=pk)

    if request.method == 'GET':
        return Response(AnnouncementSerializer(announcement).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = AnnouncementSerializer(announcement, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'Announcement', announcement.id, changes=request.data,
                             object_name=announcement.text[:255])
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    text = announcement.text
    announcement.delete()
    create_audit_log(request, 'delete', 'Announcement', pk, changes={'text': text}, object_name=text[:255])
    logger.info(f"Announcement {pk} deleted by {request.user.username}")
    return Response(status=status.HTTP_204_NO_CONTENT)
