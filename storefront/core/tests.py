"""
Test suite for core: authentication, public config and audit logging
"""
from django.test import TestCase, RequestFactory, override_settings
from rest_framework import status
from storefront.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from storefront.core.models import AuditLog
from storefront.core.utils import create_audit_log, get_client_ip, error_response_data, is_admin_user


class AuthAPITests(TestCase):
    """Test JWT login and the current user endpoint"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.user = TestDataFactory.create_user(username='shopper', password='secret-pass-1')

    def test_login_returns_tokens(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'shopper', 'password': 'secret-pass-1'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

    def test_login_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'shopper', 'password': 'nope'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_inactive_user(self):
        self.user.is_active = False
        self.user.save()
        response = self.client.post('/api/v1/auth/login/', {'username': 'shopper', 'password': 'secret-pass-1'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_token(self):
        login = self.client.post('/api/v1/auth/login/', {'username': 'shopper', 'password': 'secret-pass-1'},
                                 format='json')
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_me(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'shopper')

    def test_me_requires_authentication(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


@override_settings(
    API_BASE_URL='https://api.shop.test',
    PAYPAL_CLIENT_ID='paypal-client',
    CLOUDINARY_CLOUD_NAME='shop-cloud',
    CLOUDINARY_UPLOAD_PRESET='unsigned-preset',
    CLOUDINARY_API_SECRET='do-not-leak',
    STORE_CURRENCY='EUR',
)
class ClientConfigTests(TestCase):
    """Test the public client configuration endpoint"""

    def test_config_is_public(self):
        response = AuthenticatedAPIClient().get('/api/v1/config/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['api_base_url'], 'https://api.shop.test')
        self.assertEqual(response.data['currency'], 'EUR')
        self.assertEqual(response.data['payment']['paypal_client_id'], 'paypal-client')
        self.assertEqual(response.data['media']['cloud_name'], 'shop-cloud')

    def test_config_hides_secrets(self):
        response = AuthenticatedAPIClient().get('/api/v1/config/')
        self.assertNotIn('do-not-leak', str(response.data))


class AuditLogTests(TestCase):
    """Test audit log helpers and endpoints"""

    def setUp(self):
        self.factory = RequestFactory()
        self.admin = TestDataFactory.create_admin()

    def test_get_client_ip_prefers_forwarded_for(self):
        request = self.factory.get('/', HTTP_X_FORWARDED_FOR='203.0.113.7, 10.0.0.1', REMOTE_ADDR='10.0.0.2')
        self.assertEqual(get_client_ip(request), '203.0.113.7')
        self.assertEqual(get_client_ip(self.factory.get('/', REMOTE_ADDR='10.0.0.2')), '10.0.0.2')

    def test_create_audit_log(self):
        request = self.factory.post('/', REMOTE_ADDR='127.0.0.1')
        request.user = self.admin
        log = create_audit_log(request, 'create', 'ShippingZone', 5, changes={'name': 'EU'}, object_name='EU')
        self.assertIsNotNone(log)
        self.assertEqual(log.user, self.admin)
        self.assertEqual(log.object_id, '5')
        self.assertEqual(log.ip_address, '127.0.0.1')

    def test_create_audit_log_skips_missing_fields(self):
        self.assertIsNone(create_audit_log(user=self.admin, action='create', model_name='Product'))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_error_response_data(self):
        self.assertEqual(error_response_data('Oops'), {'errors': ['Oops']})
        self.assertEqual(error_response_data(('a', 'b')), {'errors': ['a', 'b']})

    def test_is_admin_user(self):
        self.assertTrue(is_admin_user(self.admin))
        self.assertFalse(is_admin_user(TestDataFactory.create_user()))

    def test_audit_log_list_admin_only(self):
        create_audit_log(user=self.admin, action='delete', model_name='FooterLink', object_id=1)
        create_audit_log(user=self.admin, action='create', model_name='Product', object_id=2)

        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user())
        self.assertEqual(client.get('/api/v1/audit-logs/').status_code, status.HTTP_403_FORBIDDEN)

        client.authenticate_user(self.admin)
        response = client.get('/api/v1/audit-logs/?action=delete')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['model_name'], 'FooterLink')
