"""
Test suite for storefront content
Tests: hero banner, footer settings and links (including reorder), marquee announcements
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from storefront.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Hero, FooterSettings, FooterLink, Announcement


class ContentTestCase(TestCase):

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.anonymous = AuthenticatedAPIClient()


class HeroTests(ContentTestCase):

    def test_defaults(self):
        hero = TestDataFactory.create_hero()
        self.assertEqual(hero.primary_button_text, 'Shop Collection')
        self.assertEqual(hero.secondary_button_text, 'Explore Lookbook')

    def test_activating_hero_deactivates_others(self):
        first = TestDataFactory.create_hero(title='Spring')
        second = TestDataFactory.create_hero(title='Summer')
        first.refresh_from_db()
        self.assertFalse(first.is_active)
        self.assertTrue(second.is_active)
        self.assertEqual(Hero.get_active(), second)

    def test_get_without_hero_returns_404(self):
        response = self.anonymous.get('/api/v1/content/hero/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_put_creates_then_updates(self):
        data = {'title': 'New Season', 'subtitle': 'Fresh arrivals', 'image': 'https://cdn.test/hero.jpg'}
        response = self.client.put('/api/v1/content/hero/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['primary_button_text'], 'Shop Collection')

        data['title'] = 'Final Sale'
        response = self.client.put('/api/v1/content/hero/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Hero.objects.count(), 1)

        public = self.anonymous.get('/api/v1/content/hero/')
        self.assertEqual(public.data['title'], 'Final Sale')

    def test_cached_hero_refreshed_after_update(self):
        hero = TestDataFactory.create_hero(title='Cached')
        self.assertEqual(self.anonymous.get('/api/v1/content/hero/').data['title'], 'Cached')
        hero.title = 'Changed'
        hero.save()
        self.assertEqual(self.anonymous.get('/api/v1/content/hero/').data['title'], 'Changed')

    def test_put_requires_admin(self):
        response = self.anonymous.put('/api/v1/content/hero/', {'title': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_put_requires_image(self):
        response = self.client.put('/api/v1/content/hero/', {'title': 'No image', 'subtitle': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('image', response.data)


class FooterSettingsTests(ContentTestCase):

    def test_load_creates_defaults(self):
        self.assertEqual(FooterSettings.objects.count(), 0)
        settings_obj = FooterSettings.load()
        self.assertEqual(settings_obj.newsletter_title, 'Join Our Newsletter')
        self.assertEqual(FooterSettings.load().id, settings_obj.id)
        self.assertEqual(FooterSettings.objects.count(), 1)

    def test_get_settings(self):
        response = self.anonymous.get('/api/v1/footer/settings/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['newsletter']['button_text'], 'Subscribe')
        self.assertEqual(response.data['social_links']['facebook'], '')

    def test_update_nested_settings(self):
        payload = {
            'phone': '+44 20 7946 0000',
            'social_links': {'instagram': 'https://instagram.com/shop'},
            'newsletter': {'title': 'Stay in touch'},
        }
        response = self.client.put('/api/v1/footer/settings/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        settings_obj = FooterSettings.load()
        self.assertEqual(settings_obj.instagram, 'https://instagram.com/shop')
        self.assertEqual(settings_obj.newsletter_title, 'Stay in touch')
        self.assertEqual(settings_obj.newsletter_button_text, 'Subscribe')
        self.assertEqual(self.anonymous.get('/api/v1/footer/settings/').data['phone'], '+44 20 7946 0000')


class FooterLinkTests(ContentTestCase):

    def test_new_link_goes_to_end_of_section(self):
        TestDataFactory.create_footer_link(section='shop', order=0)
        TestDataFactory.create_footer_link(section='shop', order=1)
        TestDataFactory.create_footer_link(section='support', order=0)
        response = self.client.post('/api/v1/footer/links/', {'name': 'Sale', 'url': '/sale', 'section': 'shop'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['order'], 2)

    def test_invalid_section(self):
        response = self.client.post('/api/v1/footer/links/', {'name': 'Blog', 'url': '/blog', 'section': 'news'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('section', response.data)

    def test_public_list_only_active(self):
        TestDataFactory.create_footer_link(name='Shown')
        TestDataFactory.create_footer_link(name='Hidden', is_active=False)
        response = self.anonymous.get('/api/v1/footer/links/')
        self.assertEqual([link['name'] for link in response.data], ['Shown'])

    def test_reorder_moves_links_between_sections(self):
        a = TestDataFactory.create_footer_link(name='A', section='shop', order=0)
        b = TestDataFactory.create_footer_link(name='B', section='shop', order=1)
        c = TestDataFactory.create_footer_link(name='C', section='company', order=0)
        payload = {'links': [
            {'id': b.id, 'order': 0, 'section': 'shop'},
            {'id': a.id, 'order': 1, 'section': 'company'},
            {'id': c.id, 'order': 0, 'section': 'company'},
        ]}
        response = self.client.put('/api/v1/footer/links/reorder/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        a.refresh_from_db()
        b.refresh_from_db()
        self.assertEqual((a.section, a.order), ('company', 1))
        self.assertEqual((b.section, b.order), ('shop', 0))

    def test_reorder_unknown_id_changes_nothing(self):
        a = TestDataFactory.create_footer_link(name='A', section='shop', order=0)
        payload = {'links': [
            {'id': a.id, 'order': 3, 'section': 'support'},
            {'id': 99999, 'order': 0, 'section': 'shop'},
        ]}
        response = self.client.put('/api/v1/footer/links/reorder/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'], ['Footer link 99999 not found'])
        a.refresh_from_db()
        self.assertEqual((a.section, a.order), ('shop', 0))

    def test_reorder_unknown_section_rejected(self):
        a = TestDataFactory.create_footer_link(name='A')
        payload = {'links': [{'id': a.id, 'order': 0, 'section': 'legal'}]}
        response = self.client.put('/api/v1/footer/links/reorder/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reorder_requires_admin(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(TestDataFactory.create_user())
        response = client.put('/api/v1/footer/links/reorder/', {'links': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_link(self):
        link = TestDataFactory.create_footer_link()
        response = self.client.delete(f'/api/v1/footer/links/{link.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(FooterLink.objects.filter(id=link.id).exists())


class AnnouncementTests(ContentTestCase):

    def test_create_normalizes_colors(self):
        payload = {'text': 'Free shipping over $75', 'text_color': 'fff', 'background_color': '#4f46e5'}
        response = self.client.post('/api/v1/announcements/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['text_color'], '#FFFFFF')
        self.assertEqual(response.data['background_color'], '#4F46E5')
        self.assertEqual(response.data['icon'], 'Star')

    def test_invalid_color_rejected(self):
        payload = {'text': 'Sale', 'background_color': 'purple'}
        response = self.client.post('/api/v1/announcements/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'], ['Background color must be a valid hex color (#RRGGBB)'])

    def test_active_announcements_by_platform(self):
        TestDataFactory.create_announcement(text='Everywhere', platform='both', order=0)
        TestDataFactory.create_announcement(text='Web only', platform='web', order=1)
        TestDataFactory.create_announcement(text='App only', platform='mobile', order=2)
        TestDataFactory.create_announcement(text='Off', is_active=False)

        response = self.anonymous.get('/api/v1/announcements/active/')
        self.assertEqual([a['text'] for a in response.data], ['Everywhere', 'Web only', 'App only'])

        response = self.anonymous.get('/api/v1/announcements/active/?platform=mobile')
        self.assertEqual([a['text'] for a in response.data], ['Everywhere', 'App only'])

    def test_active_cache_refreshed_on_change(self):
        announcement = TestDataFactory.create_announcement(text='Old')
        self.assertEqual(len(self.anonymous.get('/api/v1/announcements/active/').data), 1)
        announcement.is_active = False
        announcement.save()
        self.assertEqual(self.anonymous.get('/api/v1/announcements/active/').data, [])

    def test_admin_list_requires_admin(self):
        response = self.anonymous.get('/api/v1/announcements/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_patch_announcement(self):
        announcement = TestDataFactory.create_announcement()
        response = self.client.patch(f'/api/v1/announcements/{announcement.id}/', {'text_color': '000'},
                                     format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        announcement.refresh_from_db()
        self.assertEqual(announcement.text_color, '#000000')
        self.assertEqual(Announcement.objects.count(), 1)
