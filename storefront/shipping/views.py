import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser, AllowAny
from django.shortcuts import get_object_or_404
from django.db import transaction
from storefront.core.utils import create_audit_log
from .models import ShippingZone, ShippingRate
from .serializers import ShippingZoneSerializer, ShippingRateSerializer, ShippingQuoteSerializer
from .filters import ShippingZoneFilter, ShippingRateFilter
from .calculation import find_shipping_options

logger = logging.getLogger('storefront.shipping')


# Zone views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
def zone_list_create(request):
    """List shipping zones or create a new zone"""
    if request.method == 'GET':
        zones = ShippingZoneFilter(request.query_params, queryset=ShippingZone.objects.all()).qs
        serializer = ShippingZoneSerializer(zones, many=True)
        return Response(serializer.data)

    logger.info(f"User {request.user.username} creating shipping zone with data: {request.data}")
    serializer = ShippingZoneSerializer(data=request.data)
    if serializer.is_valid():
        zone = serializer.save()
        create_audit_log(request, 'create', 'ShippingZone', zone.id, changes=serializer.data, object_name=zone.name)
        logger.info(f"Shipping zone '{zone.name}' created by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    logger.warning(f"Shipping zone validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminUser])
def zone_detail(request, pk):
    """Retrieve, update or delete a shipping zone; deleting a zone deletes its rates"""
    zone = get_object_or_404(ShippingZone, pk=pk)

    if request.method == 'GET':
        serializer = ShippingZoneSerializer(zone)
        return Response(serializer.data)

    if request.method in ('PUT', 'PATCH'):
        serializer = ShippingZoneSerializer(zone, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'ShippingZone', zone.id, changes=request.data, object_name=zone.name)
            logger.info(f"Shipping zone {pk} updated by {request.user.username}")
            return Response(serializer.data)
        logger.warning(f"Shipping zone {pk} update failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    zone_name = zone.name
    rate_count = zone.rates.count()
    zone.delete()
    create_audit_log(request, 'delete', 'ShippingZone', pk,
                     changes={'name': zone_name, 'rates_deleted': rate_count}, object_name=zone_name)
    logger.info(f"Shipping zone '{zone_name}' and {rate_count} rate(s) deleted by {request.user.username}")
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminUser])
def zone_rates(request, pk):
    """List the rates of one zone"""
    zone = get_object_or_404(ShippingZone, pk=pk)
    serializer = ShippingRateSerializer(zone.rates.select_related('zone'), many=True)
    return Response(serializer.data)


# Rate views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
def rate_list_create(request):
    """List shipping rates (filterable by zone, type and is_active) or create one"""
    if request.method == 'GET':
        queryset = ShippingRate.objects.select_related('zone')
        rates = ShippingRateFilter(request.query_params, queryset=queryset).qs
        serializer = ShippingRateSerializer(rates, many=True)
        return Response(serializer.data)

    logger.info(f"User {request.user.username} creating shipping rate with data: {request.data}")
    serializer = ShippingRateSerializer(data=request.data)
    if serializer.is_valid():
        rate = serializer.save()
        create_audit_log(request, 'create', 'ShippingRate', rate.id, changes=serializer.data, object_name=rate.name)
        logger.info(f"Shipping rate '{rate.name}' created in zone '{rate.zone.name}' by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    logger.warning(f"Shipping rate validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminUser])
def rate_detail(request, pk):
    """
    Retrieve, replace or delete a shipping rate.

    PUT replaces the whole rate document; conditions not present in the
    payload are dropped.
    """
    rate = get_object_or_404(ShippingRate.objects.select_related('zone'), pk=pk)

    if request.method == 'GET':
        serializer = ShippingRateSerializer(rate)
        return Response(serializer.data)

    if request.method == 'PUT':
        serializer = ShippingRateSerializer(rate, data=request.data)
        if serializer.is_valid():
            with transaction.atomic():
                serializer.save()
            create_audit_log(request, 'update', 'ShippingRate', rate.id, changes=serializer.data, object_name=rate.name)
            logger.info(f"Shipping rate {pk} replaced by {request.user.username}")
            return Response(serializer.data)
        logger.warning(f"Shipping rate {pk} update failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    rate_name = rate.name
    rate.delete()
    create_audit_log(request, 'delete', 'ShippingRate', pk, changes={'name': rate_name}, object_name=rate_name)
    logger.info(f"Shipping rate '{rate_name}' deleted by {request.user.username}")
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([AllowAny])
def calculate_shipping(request):
    """Shipping options for a cart destined to a country (and optional region), cheapest first"""
    serializer = ShippingQuoteSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    options = find_shipping_options(
        subtotal=data['subtotal'],
        weight=data['weight'],
        country=data['country'].upper(),
        region=data.get('region') or None,
        currency=data.get('currency') or None,
    )
    logger.debug(f"Shipping quote for {data['country']}: {len(options)} option(s)")
    for option in options:
        option['fee'] = str(option['fee'])
    return Response({'options': options, 'count': len(options)})
