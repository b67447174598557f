from rest_framework import serializers
from storefront.catalog.validators import validate_hex_color, format_hex_color
from .models import Hero, FooterSettings, FooterLink, Announcement


class HeroSerializer(serializers.ModelSerializer):
    class Meta:
        model = Hero
        fields = ['id', 'title', 'subtitle', 'image', 'primary_button_text', 'secondary_button_text',
                  'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class SocialLinksSerializer(serializers.Serializer):
    facebook = serializers.CharField(required=False, allow_blank=True, max_length=255)
    twitter = serializers.CharField(required=False, allow_blank=True, max_length=255)
    instagram = serializers.CharField(required=False, allow_blank=True, max_length=255)
    youtube = serializers.CharField(required=False, allow_blank=True, max_length=255)


class NewsletterSerializer(serializers.Serializer):
    title = serializers.CharField(source='newsletter_title', required=False, max_length=200)
    subtitle = serializers.CharField(source='newsletter_subtitle', required=False, max_length=300)
    placeholder = serializers.CharField(source='newsletter_placeholder', required=False, max_length=100)
    button_text = serializers.CharField(source='newsletter_button_text', required=False, max_length=50)


class FooterSettingsSerializer(serializers.ModelSerializer):
    social_links = SocialLinksSerializer(source='*', required=False)
    newsletter = NewsletterSerializer(source='*', required=False)

    class Meta:
        model = FooterSettings
        fields = ['id', 'description', 'address', 'phone', 'email', 'social_links', 'newsletter', 'updated_at']
        read_only_fields = ['updated_at']


class FooterLinkSerializer(serializers.ModelSerializer):
    order = serializers.IntegerField(required=False, min_value=0)

    class Meta:
        model = FooterLink
        fields = ['id', 'name', 'url', 'section', 'order', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Link name is required')
        return value.strip()

    def validate_url(self, value):
        if not value.strip():
            raise serializers.ValidationError('Link URL is required')
        return value.strip()

    def create(self, validated_data):
        if validated_data.get('order') is None:
            # new links go to the end of their section
            validated_data['order'] = FooterLink.objects.filter(section=validated_data['section']).count()
        return super().create(validated_data)


class LinkOrderSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order = serializers.IntegerField(min_value=0)
    section = serializers.ChoiceField(choices=FooterLink.SECTION_CHOICES)


class FooterLinkReorderSerializer(serializers.Serializer):
    links = LinkOrderSerializer(many=True, allow_empty=False)

    def validate_links(self, value):
        ids = [link['id'] for link in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError('Each link may appear only once')
        return value


class AnnouncementSerializer(serializers.ModelSerializer):
    class Meta:
        model = Announcement
        fields = ['id', 'text', 'description', 'url', 'icon', 'icon_image', 'font_size', 'text_color',
                  'background_color', 'platform', 'is_active', 'order', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            # normalized in validate(), so allow shorthand input such as "fff"
            'text_color': {'max_length': 20},
            'background_color': {'max_length': 20},
        }

    def validate(self, attrs):
        errors = []
        if 'text' in attrs and not attrs['text'].strip():
            errors.append('Announcement text is required')
        for field, label in (('text_color', 'Text color'), ('background_color', 'Background color')):
            if field not in attrs:
                continue
            color = format_hex_color(attrs[field])
            if not validate_hex_color(color):
                errors.append(f'{label} must be a valid hex color (#RRGGBB)')
            attrs[field] = color
        if errors:
            raise serializers.ValidationError({'errors': errors})
        if 'text' in attrs:
            attrs['text'] = attrs['text'].strip()
        return attrs
