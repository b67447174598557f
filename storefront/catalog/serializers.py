from django.db import transaction
from django.db.models import Avg, Max
from rest_framework import serializers
from .models import Category, Product, ProductColor, ProductSize, ProductImage, Review
from .validators import validate_product_data, validate_review_data, format_hex_color


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'description', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class ProductColorSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductColor
        fields = ['id', 'name', 'code']


class ProductSizeSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductSize
        fields = ['id', 'name', 'stock']


class ProductImageSerializer(serializers.ModelSerializer):
    order = serializers.IntegerField(required=False)

    class Meta:
        model = ProductImage
        fields = ['id', 'url', 'alt_text', 'order', 'created_at']
        read_only_fields = ['created_at']


class ProductSerializer(serializers.ModelSerializer):
    """
    Product with its colors, sizes and image gallery.

    Writes replace the nested lists as a whole.
    """
    category_name = serializers.CharField(source='category.name', read_only=True, allow_null=True)
    colors = ProductColorSerializer(many=True, required=False)
    sizes = ProductSizeSerializer(many=True, required=False)
    images = ProductImageSerializer(many=True, required=False)
    average_rating = serializers.SerializerMethodField()
    review_count = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ['id', 'name', 'description', 'price', 'category', 'category_name', 'is_active',
                  'colors', 'sizes', 'images', 'average_rating', 'review_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'name': {'required': False, 'allow_blank': True},
            'price': {'required': False},
        }

    def get_average_rating(self, obj):
        average = obj.reviews.aggregate(avg=Avg('rating'))['avg']
        return round(average, 1) if average is not None else None

    def get_review_count(self, obj):
        return obj.reviews.count()

    def validate(self, attrs):
        result = validate_product_data(self.initial_data)
        if not result['is_valid']:
            raise serializers.ValidationError({'errors': result['errors']})
        attrs['name'] = attrs['name'].strip()
        attrs['description'] = attrs['description'].strip()
        for color in attrs.get('colors', []):
            color['code'] = format_hex_color(color['code'])
        return attrs

    def _write_children(self, product, colors, sizes, images):
        if colors is not None:
            product.colors.all().delete()
            ProductColor.objects.bulk_create([ProductColor(product=product, **color) for color in colors])
        if sizes is not None:
            product.sizes.all().delete()
            ProductSize.objects.bulk_create([ProductSize(product=product, **size) for size in sizes])
        if images is not None:
            product.images.all().delete()
            ProductImage.objects.bulk_create([
                ProductImage(product=product, url=image['url'], alt_text=image.get('alt_text', ''),
                             order=image.get('order', index))
                for index, image in enumerate(images)
            ])

    @transaction.atomic
    def create(self, validated_data):
        colors = validated_data.pop('colors', [])
        sizes = validated_data.pop('sizes', [])
        images = validated_data.pop('images', [])
        product = Product.objects.create(**validated_data)
        self._write_children(product, colors, sizes, images)
        return product

    @transaction.atomic
    def update(self, instance, validated_data):
        colors = validated_data.pop('colors', None)
        sizes = validated_data.pop('sizes', None)
        images = validated_data.pop('images', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        self._write_children(instance, colors, sizes, images)
        return instance


class ImageOrderSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order = serializers.IntegerField(min_value=0)


class ImageReorderSerializer(serializers.Serializer):
    images = ImageOrderSerializer(many=True, allow_empty=False)

    def validate_images(self, value):
        ids = [item['id'] for item in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError('Each image may appear only once')
        return value


class NewImageSerializer(serializers.Serializer):
    url = serializers.URLField(max_length=500)
    alt_text = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    order = serializers.IntegerField(required=False, min_value=0)

    def create(self, validated_data):
        product = self.context['product']
        if validated_data.get('order') is None:
            last = product.images.aggregate(last=Max('order'))['last']
            validated_data['order'] = 0 if last is None else last + 1
        return ProductImage.objects.create(product=product, **validated_data)


class ReviewSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True, allow_null=True)
    # presence and range are reported by validate_review_data
    rating = serializers.IntegerField(required=False)
    comment = serializers.CharField(required=False, allow_blank=True)
    photos = serializers.ListField(child=serializers.URLField(), required=False)

    class Meta:
        model = Review
        fields = ['id', 'product', 'username', 'rating', 'comment', 'photos', 'created_at']
        read_only_fields = ['product', 'created_at']

    def validate(self, attrs):
        result = validate_review_data(self.initial_data)
        if not result['is_valid']:
            raise serializers.ValidationError({'errors': result['errors']})
        attrs['comment'] = attrs['comment'].strip()
        return attrs
