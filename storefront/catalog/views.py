import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser, AllowAny, IsAuthenticatedOrReadOnly
from django.shortcuts import get_object_or_404
from django.db import transaction
from storefront.core.utils import create_audit_log, is_admin_user, error_response_data
from .models import Category, Product, ProductImage
from .serializers import (
    CategorySerializer, ProductSerializer, ProductImageSerializer,
    NewImageSerializer, ImageReorderSerializer, ReviewSerializer,
)
from .filters import ProductFilter
from .media import upload_image, MediaUploadError

logger = logging.getLogger('storefront.catalog')


# Category views
@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def category_list_create(request):
    """List active categories or create a category (create requires admin)"""
    if request.method == 'GET':
        categories = Category.objects.all()
        if not is_admin_user(request.user):
            categories = categories.filter(is_active=True)
        serializer = CategorySerializer(categories, many=True)
        return Response(serializer.data)

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user} attempted to create category without admin privileges")
        return Response({'error': 'Only administrators can create categories'}, status=status.HTTP_403_FORBIDDEN)

    serializer = CategorySerializer(data=request.data)
    if serializer.is_valid():
        category = serializer.save()
        create_audit_log(request, 'create', 'Category', category.id, changes=serializer.data, object_name=category.name)
        logger.info(f"Category '{category.name}' created by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Product views
@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def product_list_create(request):
    """List products (active only unless admin) or create a product (admin)"""
    if request.method == 'GET':
        queryset = Product.objects.select_related('category').prefetch_related('colors', 'sizes', 'images')
        if not is_admin_user(request.user):
            queryset = queryset.filter(is_active=True)
        products = ProductFilter(request.query_params, queryset=queryset).qs
        serializer = ProductSerializer(products, many=True)
        return Response(serializer.data)

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user} attempted to create product without admin privileges")
        return Response({'error': 'Only administrators can create products'}, status=status.HTTP_403_FORBIDDEN)

    logger.info(f"User {request.user.username} creating product '{request.data.get('name')}'")
    serializer = ProductSerializer(data=request.data)
    if serializer.is_valid():
        product = serializer.save()
        create_audit_log(request, 'create', 'Product', product.id, changes={'name': product.name}, object_name=product.name)
        logger.info(f"Product '{product.name}' created by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    logger.warning(f"Product validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([AllowAny])
def product_detail(request, pk):
    """Retrieve a product, or replace/delete it (admin)"""
    product = get_object_or_404(Product.objects.select_related('category'), pk=pk)

    if request.method == 'GET':
        if not product.is_active and not is_admin_user(request.user):
            return Response({'error': 'Product not found'}, status=status.HTTP_404_NOT_FOUND)
        serializer = ProductSerializer(product)
        return Response(serializer.data)

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user} attempted to modify product {pk} without admin privileges")
        return Response({'error': 'Only administrators can modify products'}, status=status.HTTP_403_FORBIDDEN)

    if request.method == 'PUT':
        serializer = ProductSerializer(product, data=request.data)
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'Product', product.id, changes={'name': product.name}, object_name=product.name)
            logger.info(f"Product {pk} updated by {request.user.username}")
            return Response(serializer.data)
        logger.warning(f"Product {pk} update failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    product_name = product.name
    product.delete()
    create_audit_log(request, 'delete', 'Product', pk, changes={'name': product_name}, object_name=product_name)
    logger.info(f"Product '{product_name}' deleted by {request.user.username}")
    return Response(status=status.HTTP_204_NO_CONTENT)


# Image gallery views
@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def product_images(request, pk):
    """
    List a product's images or add one (admin).

    POST accepts either ``{"url", "alt_text"}`` or a multipart ``file``
    which is uploaded to object storage first. Without an explicit order
    the image is appended to the end of the gallery.
    """
    product = get_object_or_404(Product, pk=pk)

    if request.method == 'GET':
        serializer = ProductImageSerializer(product.images.all(), many=True)
        return Response(serializer.data)

    if not is_admin_user(request.user):
        return Response({'error': 'Only administrators can add product images'}, status=status.HTTP_403_FORBIDDEN)

    data = request.data.dict() if hasattr(request.data, 'dict') else dict(request.data)
    upload = request.FILES.get('file')
    if upload is not None:
        data.pop('file', None)
        try:
            data['url'] = upload_image(upload)['url']
        except MediaUploadError as e:
            logger.error(f"Image upload for product {pk} failed: {str(e)}")
            return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)

    serializer = NewImageSerializer(data=data, context={'product': product})
    if serializer.is_valid():
        image = serializer.save()
        create_audit_log(request, 'create', 'ProductImage', image.id, changes={'product': product.id, 'url': image.url},
                         object_name=product.name)
        logger.info(f"Image {image.id} added to product {pk} at position {image.order}")
        return Response(ProductImageSerializer(image).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminUser])
def product_image_delete(request, pk, image_id):
    """Remove an image from a product; the last image cannot be removed"""
    image = get_object_or_404(ProductImage, pk=image_id, product_id=pk)
    if image.product.images.count() <= 1:
        return Response(error_response_data('At least one product image is required'),
                        status=status.HTTP_400_BAD_REQUEST)
    image.delete()
    create_audit_log(request, 'delete', 'ProductImage', image_id, changes={'product': pk}, object_name=image.product.name)
    logger.info(f"Image {image_id} removed from product {pk} by {request.user.username}")
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdminUser])
def product_images_reorder(request, pk):
    """
    Persist a new gallery order.

    Body: ``{"images": [{"id": 3, "order": 0}, ...]}``. Every id must belong
    to the product; the whole request is applied in one transaction or not
    at all.
    """
    product = get_object_or_404(Product, pk=pk)
    serializer = ImageReorderSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    entries = serializer.validated_data['images']
    images = {image.id: image for image in product.images.all()}
    unknown = [entry['id'] for entry in entries if entry['id'] not in images]
    if unknown:
        logger.warning(f"Reorder of product {pk} rejected, unknown image ids: {unknown}")
        return Response(error_response_data([f'Image {image_id} does not belong to this product' for image_id in unknown]),
                        status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        for entry in entries:
            image = images[entry['id']]
            image.order = entry['order']
            image.save(update_fields=['order'])

    create_audit_log(request, 'reorder', 'Product', product.id,
                     changes={'images': [{'id': e['id'], 'order': e['order']} for e in entries]},
                     object_name=product.name)
    logger.info(f"Gallery of product {pk} reordered by {request.user.username}")
    serializer = ProductImageSerializer(product.images.all(), many=True)
    return Response(serializer.data)


# Review views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def product_reviews(request, pk):
    """List a product's reviews or post a review as the authenticated user"""
    product = get_object_or_404(Product, pk=pk)

    if request.method == 'GET':
        serializer = ReviewSerializer(product.reviews.select_related('user'), many=True)
        return Response(serializer.data)

    serializer = ReviewSerializer(data=request.data)
    if serializer.is_valid():
        review = serializer.save(product=product, user=request.user)
        logger.info(f"User {request.user.username} reviewed product {pk} ({review.rating}/5)")
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    logger.warning(f"Review for product {pk} rejected: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
@parser_classes([MultiPartParser, FormParser])
def media_upload(request):
    """Upload an image to object storage and return its URL"""
    upload = request.FILES.get('file')
    if upload is None:
        return Response(error_response_data('No file provided'), status=status.HTTP_400_BAD_REQUEST)

    try:
        result = upload_image(upload, folder=request.data.get('folder') or None)
    except MediaUploadError as e:
        logger.error(f"Media upload by {request.user.username} failed: {str(e)}")
        return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)

    create_audit_log(request, 'media_upload', 'Media', result['public_id'] or upload.name,
                     changes={'url': result['url']}, object_name=upload.name)
    return Response(result, status=status.HTTP_201_CREATED)
