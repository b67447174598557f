import io
import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from storefront.core.utils import create_audit_log, error_response_data
from .models import InventoryItem
from .serializers import InventoryItemSerializer, InventoryHistorySerializer
from .filters import InventoryFilter
from .services import InventoryError, add_inventory, update_inventory, bulk_update_inventory, get_low_stock_items
from .spreadsheet import (
    WORKBOOK_CONTENT_TYPE, export_inventory, export_inventory_workbook, read_inventory_upload, import_inventory_rows,
)

logger = logging.getLogger('storefront.inventory')

BODY_NOT_OBJECT = 'Request body must be a JSON object'


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
def inventory_list_create(request):
    """List inventory records (filterable by status, location, product) or add one"""
    if request.method == 'GET':
        queryset = InventoryItem.objects.select_related('product')
        items = InventoryFilter(request.query_params, queryset=queryset).qs
        serializer = InventoryItemSerializer(items, many=True)
        return Response(serializer.data)

    if not isinstance(request.data, dict):
        return Response(error_response_data(BODY_NOT_OBJECT), status=status.HTTP_400_BAD_REQUEST)

    logger.info(f"User {request.user.username} adding inventory: {request.data}")
    try:
        item = add_inventory(request.data, request.user)
    except InventoryError as e:
        logger.warning(f"Inventory add rejected: {e.message}")
        return Response({'error': e.message}, status=e.status_code)

    create_audit_log(request, 'create', 'InventoryItem', item.id,
                     changes={'size': item.size, 'color': item.color, 'quantity': item.quantity},
                     object_name=item.product.name)
    return Response(InventoryItemSerializer(item).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminUser])
def inventory_detail(request, pk):
    """Retrieve an inventory record, set its quantity, or delete it"""
    item = get_object_or_404(InventoryItem.objects.select_related('product'), pk=pk)

    if request.method == 'GET':
        return Response(InventoryItemSerializer(item).data)

    if request.method == 'PUT':
        if not isinstance(request.data, dict):
            return Response(error_response_data(BODY_NOT_OBJECT), status=status.HTTP_400_BAD_REQUEST)
        previous = item.quantity
        try:
            update_inventory(item, request.data.get('quantity'), request.user,
                             reason=request.data.get('reason') or 'Manual update',
                             location=request.data.get('location'))
        except InventoryError as e:
            return Response({'error': e.message}, status=e.status_code)
        create_audit_log(request, 'stock_adjust', 'InventoryItem', item.id,
                         changes={'quantity': {'old': previous, 'new': item.quantity}},
                         object_name=item.product.name)
        return Response(InventoryItemSerializer(item).data)

    label = str(item)
    item.delete()
    create_audit_log(request, 'delete', 'InventoryItem', pk, changes={'item': label}, object_name=label[:255])
    logger.info(f"Inventory record {pk} deleted by {request.user.username}")
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminUser])
def inventory_history(request, pk):
    """Stock change history of one inventory record"""
    item = get_object_or_404(InventoryItem, pk=pk)
    serializer = InventoryHistorySerializer(item.history.select_related('product', 'user'), many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminUser])
def low_stock(request):
    """Items at or below their low stock threshold, lowest first"""
    include_out = request.query_params.get('include_out_of_stock', '').lower() in ('1', 'true', 'yes')
    serializer = InventoryItemSerializer(get_low_stock_items(include_out_of_stock=include_out), many=True)
    return Response(serializer.data)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdminUser])
def inventory_bulk_update(request):
    """Set quantities of several records at once: ``{"items": [{"id", "quantity"}]}``"""
    if not isinstance(request.data, dict):
        return Response(error_response_data(BODY_NOT_OBJECT), status=status.HTTP_400_BAD_REQUEST)

    try:
        items = bulk_update_inventory(request.data.get('items'), request.user)
    except InventoryError as e:
        logger.warning(f"Bulk inventory update rejected: {e.message}")
        return Response({'error': e.message}, status=e.status_code)

    for item in items:
        create_audit_log(request, 'stock_adjust', 'InventoryItem', item.id,
                         changes={'quantity': item.quantity, 'reason': 'Bulk update'},
                         object_name=item.product.name)
    return Response(InventoryItemSerializer(items, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminUser])
def inventory_export(request):
    """
    Download inventory records (honours the list filters).

    ``?file_format=xlsx`` returns an Excel workbook; the default is CSV.
    """
    file_format = (request.query_params.get('file_format') or 'csv').lower()
    if file_format not in ('csv', 'xlsx'):
        return Response(error_response_data('File format must be csv or xlsx'), status=status.HTTP_400_BAD_REQUEST)

    queryset = InventoryItem.objects.select_related('product')
    items = InventoryFilter(request.query_params, queryset=queryset).qs

    if file_format == 'xlsx':
        buffer = io.BytesIO()
        count = export_inventory_workbook(items, buffer)
        response = HttpResponse(buffer.getvalue(), content_type=WORKBOOK_CONTENT_TYPE)
    else:
        response = HttpResponse(content_type='text/csv; charset=utf-8')
        count = export_inventory(items, response)
    filename = f"inventory_export_{timezone.localdate().isoformat()}.{file_format}"
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    logger.info(f"User {request.user.username} exported {count} inventory row(s) as {file_format}")
    return response


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
@parser_classes([MultiPartParser, FormParser])
def inventory_import(request):
    """Import an inventory spreadsheet (.csv or .xlsx) uploaded as ``file``"""
    upload = request.FILES.get('file')
    if upload is None:
        return Response(error_response_data('No file provided'), status=status.HTTP_400_BAD_REQUEST)

    try:
        rows = read_inventory_upload(upload.name, upload.read())
    except InventoryError as e:
        logger.warning(f"Inventory import of {upload.name} rejected: {e.message}")
        return Response({'error': e.message}, status=e.status_code)

    result = import_inventory_rows(rows, request.user)
    create_audit_log(request, 'stock_import', 'InventoryItem', upload.name[:100],
                     changes={k: result[k] for k in ('created', 'updated', 'unchanged')},
                     object_name=upload.name)
    logger.info(f"User {request.user.username} imported {upload.name}: {result['created']} created, "
                f"{result['updated']} updated, {len(result['errors'])} error row(s)")
    return Response(result)
