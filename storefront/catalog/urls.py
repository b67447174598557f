from django.urls import path
from .views import (
    category_list_create,
    product_list_create, product_detail,
    product_images, product_image_delete, product_images_reorder,
    product_reviews,
    media_upload,
)

urlpatterns = [
    path('catalog/categories/', category_list_create, name='category-list'),
    path('catalog/products/', product_list_create, name='product-list'),
    path('catalog/products/<int:pk>/', product_detail, name='product-detail'),
    path('catalog/products/<int:pk>/images/', product_images, name='product-images'),
    path('catalog/products/<int:pk>/images/reorder/', product_images_reorder, name='product-images-reorder'),
    path('catalog/products/<int:pk>/images/<int:image_id>/', product_image_delete, name='product-image-delete'),
    path('catalog/products/<int:pk>/reviews/', product_reviews, name='product-reviews'),
    path('catalog/uploads/', media_upload, name='media-upload'),
]
