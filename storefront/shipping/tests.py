"""
Test suite for the shipping module
Tests: rate condition set, zone/rate validation, formatting, fee calculation and API endpoints
"""
from datetime import date
from decimal import Decimal
from django.test import TestCase, override_settings
from rest_framework import status
from storefront.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from storefront.core.models import AuditLog
from .conditions import RateConditionSet, ConditionError
from .validation import validate_shipping_rate, validate_shipping_zone
from .formatting import format_currency, format_weight, format_delivery_time
from .calculation import calculate_shipping_fee, rate_applies, add_business_days, find_shipping_options
from .models import ShippingZone, ShippingRate


class RateConditionSetTests(TestCase):
    """Test add/remove/update/validate_all of a rate's conditions"""

    def test_add_duplicate_kind_rejected(self):
        conditions = RateConditionSet([{'type': 'min_weight', 'value': 1}])
        with self.assertRaisesMessage(ConditionError, 'A min_weight condition already exists'):
            conditions.add({'type': 'min_weight', 'value': 2})
        self.assertEqual(len(conditions), 1)

    def test_add_max_not_above_min_rejected(self):
        conditions = RateConditionSet([{'type': 'min_weight', 'value': 5}])
        with self.assertRaisesMessage(ConditionError, 'Maximum weight must be greater than minimum weight'):
            conditions.add({'type': 'max_weight', 'value': 5})

    def test_add_max_price_not_above_min_rejected(self):
        conditions = RateConditionSet([{'type': 'min_price', 'value': 50}])
        with self.assertRaisesMessage(ConditionError, 'Maximum price must be greater than minimum price'):
            conditions.add({'type': 'max_price', 'value': 20})

    def test_add_min_after_max_only_caught_by_validate_all(self):
        """The add-time check only runs when the max is added"""
        conditions = RateConditionSet([{'type': 'max_weight', 'value': 2}])
        conditions.add({'type': 'min_weight', 'value': 10})
        self.assertEqual(len(conditions), 2)
        self.assertEqual(conditions.validate_all(), ['Maximum weight must be greater than minimum weight'])

    def test_unknown_kind_rejected(self):
        with self.assertRaises(ConditionError):
            RateConditionSet().add({'type': 'max_volume', 'value': 3})

    def test_non_numeric_value_rejected(self):
        with self.assertRaises(ConditionError):
            RateConditionSet().add({'type': 'min_price', 'value': 'abc'})

    def test_remove_by_position(self):
        conditions = RateConditionSet([
            {'type': 'min_weight', 'value': 1},
            {'type': 'max_weight', 'value': 5},
        ])
        conditions.remove(0)
        self.assertEqual(conditions.to_list(), [{'type': 'max_weight', 'value': 5.0}])

    def test_update_does_not_validate(self):
        conditions = RateConditionSet([
            {'type': 'min_weight', 'value': 1},
            {'type': 'max_weight', 'value': 5},
        ])
        conditions.update(1, {'type': 'max_weight', 'value': 0.5})
        self.assertEqual(conditions.find('max_weight')['value'], Decimal('0.5'))
        self.assertIn('Maximum weight must be greater than minimum weight', conditions.validate_all())

    def test_validate_all_negative_values(self):
        conditions = RateConditionSet([{'type': 'min_price', 'value': -1}])
        self.assertEqual(conditions.validate_all(), ['min_price cannot be negative'])

    def test_validate_all_consistent(self):
        conditions = RateConditionSet([
            {'type': 'min_price', 'value': 10},
            {'type': 'max_price', 'value': 100},
        ])
        self.assertEqual(conditions.validate_all(), [])


class ShippingValidationTests(TestCase):
    """Test whole-document zone and rate validation"""

    def rate_document(self, **overrides):
        data = {
            'name': 'Standard',
            'rate_type': 'flat',
            'base_rate': '5.00',
            'estimated_days': {'min': 2, 'max': 5},
            'conditions': [],
        }
        data.update(overrides)
        return data

    def test_valid_flat_rate(self):
        self.assertEqual(validate_shipping_rate(self.rate_document()), [])

    def test_name_required(self):
        self.assertIn('Rate name is required', validate_shipping_rate(self.rate_document(name='  ')))

    def test_negative_base_rate(self):
        errors = validate_shipping_rate(self.rate_document(base_rate='-1'))
        self.assertIn('Base rate must be a non-negative number', errors)

    def test_delivery_days_inverted(self):
        errors = validate_shipping_rate(self.rate_document(estimated_days={'min': 5, 'max': 2}))
        self.assertIn('Maximum delivery days must be greater than or equal to minimum days', errors)

    def test_negative_delivery_days(self):
        errors = validate_shipping_rate(self.rate_document(estimated_days={'min': -1, 'max': 2}))
        self.assertIn('Minimum delivery days must be non-negative', errors)

        errors = validate_shipping_rate(self.rate_document(estimated_days={'min': 0, 'max': -2}))
        self.assertIn('Maximum delivery days must be non-negative', errors)

    def test_delivery_days_required(self):
        errors = validate_shipping_rate(self.rate_document(estimated_days={'min': 2}))
        self.assertIn('Estimated delivery days are required', errors)

    def test_weight_rate_needs_condition(self):
        errors = validate_shipping_rate(self.rate_document(rate_type='weight'))
        self.assertIn('At least one condition is required for weight based rates', errors)

    def test_condition_of_other_dimension_rejected(self):
        errors = validate_shipping_rate(self.rate_document(
            rate_type='price',
            conditions=[{'type': 'min_weight', 'value': 1}],
        ))
        self.assertIn('min_weight condition is not allowed for price based rates', errors)

    def test_duplicate_condition_reported(self):
        errors = validate_shipping_rate(self.rate_document(
            rate_type='weight',
            conditions=[{'type': 'min_weight', 'value': 1}, {'type': 'min_weight', 'value': 2}],
        ))
        self.assertIn('A min_weight condition already exists', errors)

    def test_zone_requires_name_and_countries(self):
        errors = validate_shipping_zone({'name': '', 'countries': []})
        self.assertIn('Zone name is required', errors)
        self.assertIn('At least one country is required', errors)

    def test_zone_invalid_country_code(self):
        errors = validate_shipping_zone({'name': 'Europe', 'countries': ['DE', 'FRA']})
        self.assertEqual(errors, ['Invalid country code: FRA'])


@override_settings(STORE_CURRENCY='USD', STORE_WEIGHT_UNIT='kg')
class FormattingTests(TestCase):
    """Test currency, weight and delivery time display"""

    def test_format_currency(self):
        self.assertEqual(format_currency(1234.5), '$1,234.50')
        self.assertEqual(format_currency('0'), '$0.00')
        self.assertEqual(format_currency(Decimal('-5'), 'EUR'), '-€5.00')

    def test_format_currency_unknown_code(self):
        self.assertEqual(format_currency(10, 'CHF'), 'CHF 10.00')

    def test_format_weight(self):
        self.assertEqual(format_weight(2.5), '2.50 kg')
        self.assertEqual(format_weight(1, 'lb'), '1.00 lb')

    def test_format_delivery_time(self):
        self.assertEqual(format_delivery_time(1, 1), '1 business day')
        self.assertEqual(format_delivery_time(3, 3), '3 business days')
        self.assertEqual(format_delivery_time(2, 5), '2-5 business days')


class ShippingCalculationTests(TestCase):
    """Test fee calculation, rate applicability and delivery dates"""

    def setUp(self):
        self.zone = TestDataFactory.create_shipping_zone(countries=['US', 'CA'])

    def test_flat_rate_fee(self):
        rate = TestDataFactory.create_shipping_rate(zone=self.zone, base_rate=Decimal('7.50'))
        self.assertEqual(calculate_shipping_fee(rate, 40, 2), Decimal('7.50'))

    def test_weight_rate_additional_fee(self):
        rate = TestDataFactory.create_shipping_rate(
            zone=self.zone, rate_type='weight', base_rate=Decimal('5.00'),
            additional_fee=Decimal('2.00'),
            conditions=[{'type': 'min_weight', 'value': 1.0}],
        )
        # 5 + (3.5 - 1) * 2
        self.assertEqual(calculate_shipping_fee(rate, 10, Decimal('3.5')), Decimal('10.00'))
        self.assertEqual(calculate_shipping_fee(rate, 10, Decimal('0.5')), Decimal('5.00'))

    def test_free_shipping_threshold(self):
        rate = TestDataFactory.create_shipping_rate(
            zone=self.zone, base_rate=Decimal('9.00'), free_shipping_threshold=Decimal('100.00'),
        )
        self.assertEqual(calculate_shipping_fee(rate, 100, 1), Decimal('0.00'))
        self.assertEqual(calculate_shipping_fee(rate, Decimal('99.99'), 1), Decimal('9.00'))

    def test_zero_threshold_does_not_make_shipping_free(self):
        rate = TestDataFactory.create_shipping_rate(
            zone=self.zone, base_rate=Decimal('4.00'), free_shipping_threshold=Decimal('0.00'),
        )
        self.assertEqual(calculate_shipping_fee(rate, 10, 1), Decimal('4.00'))

    def test_rate_applies_bounds_inclusive(self):
        rate = TestDataFactory.create_shipping_rate(
            zone=self.zone, rate_type='weight',
            conditions=[{'type': 'min_weight', 'value': 1.0}, {'type': 'max_weight', 'value': 5.0}],
        )
        self.assertTrue(rate_applies(rate, 0, 1))
        self.assertTrue(rate_applies(rate, 0, 5))
        self.assertFalse(rate_applies(rate, 0, Decimal('5.01')))
        self.assertFalse(rate_applies(rate, 0, Decimal('0.99')))

    def test_add_business_days_skips_weekend(self):
        friday = date(2026, 10, 16)
        self.assertEqual(add_business_days(friday, 0), friday)
        self.assertEqual(add_business_days(friday, 1), date(2026, 10, 19))
        self.assertEqual(add_business_days(friday, 5), date(2026, 10, 23))

    def test_find_shipping_options_sorted_cheapest_first(self):
        TestDataFactory.create_shipping_rate(zone=self.zone, name='Express', base_rate=Decimal('20.00'),
                                             estimated_days_min=1, estimated_days_max=2)
        TestDataFactory.create_shipping_rate(zone=self.zone, name='Standard', base_rate=Decimal('5.00'))
        TestDataFactory.create_shipping_rate(zone=self.zone, name='Disabled', base_rate=Decimal('1.00'),
                                             is_active=False)
        options = find_shipping_options(50, 1, 'us')
        self.assertEqual([o['name'] for o in options], ['Standard', 'Express'])
        self.assertEqual(options[1]['delivery_estimate'], '1-2 business days')

    def test_find_shipping_options_inactive_or_uncovered_zone(self):
        TestDataFactory.create_shipping_rate(zone=self.zone)
        self.assertEqual(find_shipping_options(50, 1, 'DE'), [])
        self.zone.is_active = False
        self.zone.save()
        self.assertEqual(find_shipping_options(50, 1, 'US'), [])

    def test_zone_regions_restrict_coverage(self):
        zone = TestDataFactory.create_shipping_zone(countries=['GB'], regions=['Scotland'])
        self.assertTrue(zone.covers('gb'))
        self.assertTrue(zone.covers('GB', 'scotland'))
        self.assertFalse(zone.covers('GB', 'Wales'))


class ShippingZoneAPITests(TestCase):
    """Test shipping zone endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_zone_normalizes_countries(self):
        data = {'name': '  North America ', 'countries': ['us', 'CA', 'US']}
        response = self.client.post('/api/v1/shipping/zones/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'North America')
        self.assertEqual(response.data['countries'], ['US', 'CA'])
        self.assertTrue(AuditLog.objects.filter(model_name='ShippingZone', action='create').exists())

    def test_create_zone_validation_errors(self):
        response = self.client.post('/api/v1/shipping/zones/', {'name': '', 'countries': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Zone name is required', response.data['errors'])
        self.assertIn('At least one country is required', response.data['errors'])

    def test_patch_zone_blank_name(self):
        zone = TestDataFactory.create_shipping_zone(name='Europe', countries=['DE'])
        response = self.client.patch(f'/api/v1/shipping/zones/{zone.id}/', {'name': ' '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'], ['Zone name is required'])
        zone.refresh_from_db()
        self.assertEqual(zone.name, 'Europe')

    def test_non_admin_forbidden(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user())
        response = client.post('/api/v1/shipping/zones/', {'name': 'EU', 'countries': ['DE']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_unauthorized(self):
        client = AuthenticatedAPIClient()
        response = client.get('/api/v1/shipping/zones/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_patch_zone(self):
        zone = TestDataFactory.create_shipping_zone(name='Europe', countries=['DE'])
        response = self.client.patch(f'/api/v1/shipping/zones/{zone.id}/', {'is_active': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        zone.refresh_from_db()
        self.assertFalse(zone.is_active)
        self.assertEqual(zone.countries, ['DE'])

    def test_delete_zone_deletes_rates(self):
        zone = TestDataFactory.create_shipping_zone()
        TestDataFactory.create_shipping_rate(zone=zone)
        TestDataFactory.create_shipping_rate(zone=zone)
        response = self.client.delete(f'/api/v1/shipping/zones/{zone.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ShippingZone.objects.filter(id=zone.id).exists())
        self.assertEqual(ShippingRate.objects.filter(zone_id=zone.id).count(), 0)

    def test_filter_zones_by_country(self):
        TestDataFactory.create_shipping_zone(name='Europe', countries=['DE', 'FR'])
        TestDataFactory.create_shipping_zone(name='US', countries=['US'])
        response = self.client.get('/api/v1/shipping/zones/?country=fr')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([z['name'] for z in response.data], ['Europe'])


class ShippingRateAPITests(TestCase):
    """Test shipping rate endpoints and the public shipping quote"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.zone = TestDataFactory.create_shipping_zone(countries=['US'])

    def rate_payload(self, **overrides):
        data = {
            'zone': self.zone.id,
            'name': 'Standard',
            'type': 'weight',
            'base_rate': '5.00',
            'additional_fee': '1.50',
            'conditions': [{'type': 'min_weight', 'value': 1}, {'type': 'max_weight', 'value': 10}],
            'estimated_days': {'min': 3, 'max': 5},
        }
        data.update(overrides)
        return data

    def test_create_weight_rate(self):
        response = self.client.post('/api/v1/shipping/rates/', self.rate_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['type'], 'weight')
        self.assertEqual(response.data['estimated_days'], {'min': 3, 'max': 5})
        self.assertEqual(response.data['delivery_estimate'], '3-5 business days')
        rate = ShippingRate.objects.get(id=response.data['id'])
        self.assertEqual(rate.conditions, [{'type': 'min_weight', 'value': 1.0}, {'type': 'max_weight', 'value': 10.0}])

    def test_create_rate_duplicate_condition(self):
        payload = self.rate_payload(conditions=[{'type': 'min_weight', 'value': 1}, {'type': 'min_weight', 'value': 3}])
        response = self.client.post('/api/v1/shipping/rates/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('A min_weight condition already exists', response.data['errors'])
        self.assertEqual(ShippingRate.objects.count(), 0)

    def test_create_rate_inverted_conditions(self):
        payload = self.rate_payload(conditions=[{'type': 'max_weight', 'value': 1}, {'type': 'min_weight', 'value': 3}])
        response = self.client.post('/api/v1/shipping/rates/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Maximum weight must be greater than minimum weight', response.data['errors'])

    def test_create_rate_negative_delivery_days(self):
        payload = self.rate_payload(estimated_days={'min': -1, 'max': 2})
        response = self.client.post('/api/v1/shipping/rates/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Minimum delivery days must be non-negative', response.data['errors'])
        self.assertEqual(ShippingRate.objects.count(), 0)

    def test_create_rate_blank_name(self):
        response = self.client.post('/api/v1/shipping/rates/', self.rate_payload(name='   '), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'], ['Rate name is required'])

    def test_flat_rate_drops_conditions(self):
        payload = self.rate_payload(type='flat', conditions=[{'type': 'min_weight', 'value': 1}])
        response = self.client.post('/api/v1/shipping/rates/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['conditions'], [])

    def test_put_replaces_whole_rate(self):
        rate = TestDataFactory.create_shipping_rate(
            zone=self.zone, rate_type='weight',
            conditions=[{'type': 'min_weight', 'value': 1.0}, {'type': 'max_weight', 'value': 5.0}],
        )
        payload = self.rate_payload(name='Heavy', conditions=[{'type': 'min_weight', 'value': 5}])
        response = self.client.put(f'/api/v1/shipping/rates/{rate.id}/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rate.refresh_from_db()
        self.assertEqual(rate.name, 'Heavy')
        self.assertEqual(rate.conditions, [{'type': 'min_weight', 'value': 5.0}])

    def test_filter_rates_by_type(self):
        TestDataFactory.create_shipping_rate(zone=self.zone, name='Flat')
        TestDataFactory.create_shipping_rate(zone=self.zone, name='By price', rate_type='price',
                                             conditions=[{'type': 'min_price', 'value': 10.0}])
        response = self.client.get('/api/v1/shipping/rates/?type=price')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r['name'] for r in response.data], ['By price'])

    def test_zone_rates(self):
        TestDataFactory.create_shipping_rate(zone=self.zone)
        TestDataFactory.create_shipping_rate(zone=TestDataFactory.create_shipping_zone())
        response = self.client.get(f'/api/v1/shipping/zones/{self.zone.id}/rates/')
        self.assertEqual(len(response.data), 1)

    def test_calculate_shipping_is_public(self):
        TestDataFactory.create_shipping_rate(zone=self.zone, name='Standard', base_rate=Decimal('6.00'),
                                             free_shipping_threshold=Decimal('75.00'))
        client = AuthenticatedAPIClient()
        response = client.post('/api/v1/shipping/calculate/',
                               {'subtotal': '80.00', 'weight': '2', 'country': 'us'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        option = response.data['options'][0]
        self.assertEqual(option['fee'], '0.00')
        self.assertTrue(option['is_free'])

    def test_calculate_shipping_invalid_payload(self):
        client = AuthenticatedAPIClient()
        response = client.post('/api/v1/shipping/calculate/', {'country': 'USA'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('subtotal', response.data)
