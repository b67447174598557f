"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from storefront.catalog.models import Category, Product, ProductImage, ProductSize
from storefront.shipping.models import ShippingZone, ShippingRate
from storefront.content.models import FooterLink, Announcement, Hero
from storefront.inventory.models import InventoryItem
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_admin(username=None, password='testpass123'):
        """Create a staff user"""
        return TestDataFactory.create_user(username=username, password=password, is_staff=True)

    @staticmethod
    def create_category(name=None, description=None):
        """Create a test category"""
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        return Category.objects.create(
            name=name,
            description=description or f'Test category {name}'
        )

    @staticmethod
    def create_product(name=None, category=None, price=None, is_active=True, images=1, sizes=None):
        """Create a test product with ``images`` gallery images and optional size names"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        if not category:
            category = TestDataFactory.create_category()
        product = Product.objects.create(
            name=name,
            description=f'Test product {name}',
            price=price if price is not None else Decimal('49.99'),
            category=category,
            is_active=is_active
        )
        for index in range(images):
            ProductImage.objects.create(product=product, url=f'https://cdn.test/{name}/{index}.jpg', order=index)
        for size in sizes or []:
            ProductSize.objects.create(product=product, name=size, stock=0)
        return product

    @staticmethod
    def create_shipping_zone(name=None, countries=None, regions=None, is_active=True):
        """Create a test shipping zone"""
        if not name:
            name = f'Zone_{TestDataFactory.random_string(6)}'
        return ShippingZone.objects.create(
            name=name,
            countries=countries or ['US'],
            regions=regions or [],
            is_active=is_active
        )

    @staticmethod
    def create_shipping_rate(zone=None, name=None, rate_type='flat', base_rate=None, conditions=None,
                             additional_fee=None, free_shipping_threshold=None, is_active=True,
                             estimated_days_min=3, estimated_days_max=5):
        """Create a test shipping rate"""
        if not zone:
            zone = TestDataFactory.create_shipping_zone()
        if not name:
            name = f'Rate_{TestDataFactory.random_string(6)}'
        return ShippingRate.objects.create(
            zone=zone,
            name=name,
            rate_type=rate_type,
            base_rate=base_rate if base_rate is not None else Decimal('5.00'),
            conditions=conditions or [],
            additional_fee=additional_fee if additional_fee is not None else Decimal('0.00'),
            free_shipping_threshold=free_shipping_threshold,
            is_active=is_active,
            estimated_days_min=estimated_days_min,
            estimated_days_max=estimated_days_max
        )

    @staticmethod
    def create_hero(title=None, is_active=True):
        """Create a test hero banner"""
        if not title:
            title = f'Hero_{TestDataFactory.random_string(6)}'
        return Hero.objects.create(
            title=title,
            subtitle=f'Subtitle for {title}',
            image='https://cdn.test/hero.jpg',
            is_active=is_active
        )

    @staticmethod
    def create_footer_link(name=None, section='shop', order=0, is_active=True):
        """Create a test footer link"""
        if not name:
            name = f'Link_{TestDataFactory.random_string(6)}'
        return FooterLink.objects.create(
            name=name,
            url=f'/{name.lower()}',
            section=section,
            order=order,
            is_active=is_active
        )

    @staticmethod
    def create_announcement(text=None, platform='both', is_active=True, order=0):
        """Create a test announcement"""
        return Announcement.objects.create(
            text=text or f'Announcement {TestDataFactory.random_string(6)}',
            platform=platform,
            is_active=is_active,
            order=order
        )

    @staticmethod
    def create_inventory_item(product=None, size='M', color='Black', quantity=20, location='Main Warehouse',
                              low_stock_threshold=10):
        """Create a test inventory record"""
        if not product:
            product = TestDataFactory.create_product()
        return InventoryItem.objects.create(
            product=product,
            size=size,
            color=color,
            quantity=quantity,
            location=location,
            low_stock_threshold=low_stock_threshold
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
