"""
Test suite for the catalog module
Tests: product/review/color validators, image gallery ordering, reviews and media uploads
"""
from decimal import Decimal
from unittest.mock import patch, MagicMock
import requests
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status
from storefront.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from storefront.core.models import AuditLog
from .models import ProductImage, Review
from .validators import validate_review_data, validate_hex_color, format_hex_color, validate_product_data
from .media import upload_image, sign_params, MediaUploadError


class ReviewValidatorTests(TestCase):

    def test_valid_review(self):
        result = validate_review_data({'rating': 5, 'comment': 'Lovely fabric and fit'})
        self.assertTrue(result['is_valid'])
        self.assertEqual(result['errors'], [])

    def test_rating_out_of_range_and_short_comment(self):
        result = validate_review_data({'rating': 6, 'comment': 'short'})
        self.assertFalse(result['is_valid'])
        self.assertEqual(result['errors'], [
            'Rating must be between 1 and 5',
            'Review comment must be at least 10 characters long',
        ])

    def test_missing_rating_and_comment(self):
        result = validate_review_data({'comment': '   '})
        self.assertEqual(result['errors'], ['Rating must be between 1 and 5', 'Review comment is required'])

    def test_comment_length_counts_trimmed_text(self):
        result = validate_review_data({'rating': 3, 'comment': '   123456789   '})
        self.assertIn('Review comment must be at least 10 characters long', result['errors'])

    def test_fractional_and_boolean_ratings_rejected(self):
        self.assertFalse(validate_review_data({'rating': 4.5, 'comment': 'A long enough comment'})['is_valid'])
        self.assertFalse(validate_review_data({'rating': True, 'comment': 'A long enough comment'})['is_valid'])

    def test_photos_capped_at_five(self):
        photos = [f'https://cdn.test/{i}.jpg' for i in range(6)]
        result = validate_review_data({'rating': 4, 'comment': 'A long enough comment', 'photos': photos})
        self.assertEqual(result['errors'], ['Maximum 5 photos allowed per review'])

    def test_photos_must_be_a_list(self):
        result = validate_review_data({'rating': 4, 'comment': 'A long enough comment', 'photos': 'one.jpg'})
        self.assertEqual(result['errors'], ['Photos must be provided as an array'])


class HexColorTests(TestCase):

    def test_validate_hex_color(self):
        self.assertTrue(validate_hex_color('#1a2b3c'))
        self.assertTrue(validate_hex_color('#FFFFFF'))
        self.assertFalse(validate_hex_color('#FFF'))
        self.assertFalse(validate_hex_color('FFFFFF'))
        self.assertFalse(validate_hex_color('#GGGGGG'))
        self.assertFalse(validate_hex_color('#FFFFFF\n'))
        self.assertFalse(validate_hex_color(None))

    def test_format_hex_color(self):
        self.assertEqual(format_hex_color('abc'), '#AABBCC')
        self.assertEqual(format_hex_color('#1a2b3c'), '#1A2B3C')
        self.assertEqual(format_hex_color(' #f0 0 '), '#FF0000')


class ProductValidatorTests(TestCase):

    def product_data(self, **overrides):
        data = {
            'name': 'Linen Dress',
            'description': 'Breathable summer dress',
            'price': '59.90',
            'category': 1,
            'images': [{'url': 'https://cdn.test/dress.jpg'}],
        }
        data.update(overrides)
        return data

    def test_valid_product(self):
        self.assertTrue(validate_product_data(self.product_data())['is_valid'])

    def test_required_fields(self):
        result = validate_product_data({'name': ' ', 'price': 0, 'images': []})
        self.assertEqual(result['errors'], [
            'Product name is required',
            'Product description is required',
            'Valid price is required',
            'Category is required',
            'At least one product image is required',
        ])

    def test_color_entries(self):
        result = validate_product_data(self.product_data(colors=[
            {'name': 'Navy', 'code': '#000080'},
            {'name': '', 'code': '#12'},
            {'name': 'Red', 'code': 'red'},
        ]))
        self.assertEqual(result['errors'], [
            'Color name is required for color #2',
            'Invalid color code for color #2',
            'Invalid color code for Red',
        ])

    def test_size_entries(self):
        result = validate_product_data(self.product_data(sizes=[
            {'name': 'S', 'stock': 3},
            {'name': 'M', 'stock': -1},
            {'name': '', 'stock': '4'},
        ]))
        self.assertEqual(result['errors'], [
            'Invalid stock quantity for M',
            'Size name is required for size #3',
            'Invalid stock quantity for size #3',
        ])


class ProductAPITests(TestCase):
    """Test product endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.category = TestDataFactory.create_category(name='Dresses')

    def test_create_product(self):
        data = {
            'name': ' Linen Dress ',
            'description': 'Breathable summer dress',
            'price': '59.90',
            'category': self.category.id,
            'images': [{'url': 'https://cdn.test/a.jpg'}, {'url': 'https://cdn.test/b.jpg'}],
            'colors': [{'name': 'Sand', 'code': '#e3d5b8'}],
            'sizes': [{'name': 'S', 'stock': 2}, {'name': 'M', 'stock': 5}],
        }
        response = self.client.post('/api/v1/catalog/products/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Linen Dress')
        self.assertEqual(response.data['colors'][0]['code'], '#E3D5B8')
        self.assertEqual([image['order'] for image in response.data['images']], [0, 1])
        self.assertEqual(len(response.data['sizes']), 2)

    def test_create_product_validation_errors(self):
        response = self.client.post('/api/v1/catalog/products/', {'name': 'Dress', 'price': '-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Valid price is required', response.data['errors'])
        self.assertIn('At least one product image is required', response.data['errors'])

    def test_create_product_requires_admin(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user())
        response = client.post('/api/v1/catalog/products/', {'name': 'Dress'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_public_list_hides_inactive(self):
        TestDataFactory.create_product(name='Visible', category=self.category)
        TestDataFactory.create_product(name='Hidden', category=self.category, is_active=False)
        response = AuthenticatedAPIClient().get('/api/v1/catalog/products/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['name'] for p in response.data], ['Visible'])

        admin_response = self.client.get('/api/v1/catalog/products/')
        self.assertEqual(len(admin_response.data), 2)

    def test_filter_by_price(self):
        TestDataFactory.create_product(name='Cheap', category=self.category, price=Decimal('10.00'))
        TestDataFactory.create_product(name='Pricey', category=self.category, price=Decimal('200.00'))
        response = self.client.get('/api/v1/catalog/products/?max_price=50')
        self.assertEqual([p['name'] for p in response.data], ['Cheap'])


class ProductImageAPITests(TestCase):
    """Test gallery add/delete/reorder"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.product = TestDataFactory.create_product(images=3)
        self.images = list(self.product.images.all())

    def test_add_image_appends_to_end(self):
        response = self.client.post(f'/api/v1/catalog/products/{self.product.id}/images/',
                                    {'url': 'https://cdn.test/new.jpg'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['order'], 3)

    def test_reorder_images(self):
        first, second, third = self.images
        payload = {'images': [
            {'id': third.id, 'order': 0},
            {'id': first.id, 'order': 1},
            {'id': second.id, 'order': 2},
        ]}
        response = self.client.put(f'/api/v1/catalog/products/{self.product.id}/images/reorder/', payload,
                                   format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([image['id'] for image in response.data], [third.id, first.id, second.id])
        self.assertTrue(AuditLog.objects.filter(action='reorder', model_name='Product').exists())

    def test_reorder_rejects_foreign_image(self):
        other = TestDataFactory.create_product(images=1).images.first()
        first = self.images[0]
        payload = {'images': [{'id': first.id, 'order': 5}, {'id': other.id, 'order': 0}]}
        response = self.client.put(f'/api/v1/catalog/products/{self.product.id}/images/reorder/', payload,
                                   format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'], [f'Image {other.id} does not belong to this product'])
        first.refresh_from_db()
        self.assertEqual(first.order, 0)

    def test_reorder_rejects_duplicates(self):
        first = self.images[0]
        payload = {'images': [{'id': first.id, 'order': 1}, {'id': first.id, 'order': 2}]}
        response = self.client.put(f'/api/v1/catalog/products/{self.product.id}/images/reorder/', payload,
                                   format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_image(self):
        response = self.client.delete(f'/api/v1/catalog/products/{self.product.id}/images/{self.images[0].id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.product.images.count(), 2)

    def test_cannot_delete_last_image(self):
        product = TestDataFactory.create_product(images=1)
        image = product.images.first()
        response = self.client.delete(f'/api/v1/catalog/products/{product.id}/images/{image.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(ProductImage.objects.filter(id=image.id).exists())


class ReviewAPITests(TestCase):
    """Test product review endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product()
        self.url = f'/api/v1/catalog/products/{self.product.id}/reviews/'

    def test_create_review(self):
        response = self.client.post(self.url, {'rating': 4, 'comment': '  Fits true to size  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        review = Review.objects.get(id=response.data['id'])
        self.assertEqual(review.user, self.user)
        self.assertEqual(review.comment, 'Fits true to size')

    def test_create_review_validation(self):
        response = self.client.post(self.url, {'rating': 6, 'comment': 'short'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(len(response.data['errors']), 2)

    def test_anonymous_can_read_but_not_post(self):
        Review.objects.create(product=self.product, user=self.user, rating=5, comment='Great quality overall')
        anonymous = AuthenticatedAPIClient()
        response = anonymous.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        response = anonymous.post(self.url, {'rating': 5, 'comment': 'Great quality overall'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_product_average_rating(self):
        Review.objects.create(product=self.product, rating=5, comment='Great quality overall')
        Review.objects.create(product=self.product, rating=4, comment='Nice but runs small')
        response = self.client.get(f'/api/v1/catalog/products/{self.product.id}/')
        self.assertEqual(response.data['average_rating'], 4.5)
        self.assertEqual(response.data['review_count'], 2)


@override_settings(
    CLOUDINARY_CLOUD_NAME='shop-cloud',
    CLOUDINARY_API_KEY='key-123',
    CLOUDINARY_API_SECRET='secret-456',
    CLOUDINARY_FOLDER='products',
    CLOUDINARY_TIMEOUT=5,
)
class MediaUploadTests(TestCase):
    """Test signed uploads to object storage (HTTP mocked)"""

    def image_file(self):
        return SimpleUploadedFile('dress.jpg', b'\xff\xd8\xff\xe0fakejpeg', content_type='image/jpeg')

    def test_sign_params(self):
        signature = sign_params({'timestamp': 1700000000, 'folder': 'products'}, 'secret-456')
        self.assertEqual(len(signature), 40)
        self.assertEqual(signature, sign_params({'folder': 'products', 'timestamp': 1700000000}, 'secret-456'))

    @patch('storefront.catalog.media.requests.post')
    def test_upload_image(self, mock_post):
        mock_post.return_value = MagicMock(status_code=200, json=lambda: {
            'secure_url': 'https://res.cloudinary.com/shop-cloud/image/upload/products/dress.jpg',
            'public_id': 'products/dress', 'width': 800, 'height': 1200,
        })
        result = upload_image(self.image_file())
        self.assertEqual(result['public_id'], 'products/dress')
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://api.cloudinary.com/v1_1/shop-cloud/image/upload')
        self.assertEqual(kwargs['data']['api_key'], 'key-123')
        self.assertEqual(kwargs['data']['folder'], 'products')
        self.assertNotIn('secret-456', str(kwargs['data']))

    @patch('storefront.catalog.media.requests.post')
    def test_upload_image_rejected(self, mock_post):
        mock_post.return_value = MagicMock(status_code=400, text='Invalid image file')
        with self.assertRaises(MediaUploadError):
            upload_image(self.image_file())

    @patch('storefront.catalog.media.requests.post', side_effect=requests.exceptions.ConnectionError('down'))
    def test_upload_endpoint_maps_storage_failure_to_502(self, mock_post):
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_admin())
        response = client.post('/api/v1/catalog/uploads/', {'file': self.image_file()}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertIn('error', response.data)

    @override_settings(CLOUDINARY_API_SECRET='')
    def test_upload_not_configured(self):
        with self.assertRaisesMessage(MediaUploadError, 'Image storage is not configured'):
            upload_image(self.image_file())

    def test_unsupported_type(self):
        upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')
        with self.assertRaises(MediaUploadError):
            upload_image(upload)
