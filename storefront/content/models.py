from django.db import models, transaction


class Hero(models.Model):
    """Home page hero banner; at most one is active"""
    title = models.CharField(max_length=200)
    subtitle = models.CharField(max_length=300)
    image = models.URLField(max_length=500)
    primary_button_text = models.CharField(max_length=50, default='Shop Collection')
    secondary_button_text = models.CharField(max_length=50, default='Explore Lookbook')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        with transaction.atomic():
            if self.is_active:
                Hero.objects.filter(is_active=True).exclude(pk=self.pk).update(is_active=False)
            super().save(*args, **kwargs)

    @classmethod
    def get_active(cls):
        return cls.objects.filter(is_active=True).order_by('-created_at', '-id').first()

    class Meta:
        db_table = 'heroes'
        ordering = ['-created_at']


class FooterSettings(models.Model):
    """Single row holding the storefront footer texts"""
    description = models.TextField(default='Discover luxury fashion that combines timeless elegance with modern style.')
    address = models.CharField(max_length=255, default='123 Fashion Street, NY 10001')
    phone = models.CharField(max_length=50, default='+1 (555) 123-4567')
    email = models.EmailField(default='contact@evacurves.com')
    facebook = models.CharField(max_length=255, blank=True, default='')
    twitter = models.CharField(max_length=255, blank=True, default='')
    instagram = models.CharField(max_length=255, blank=True, default='')
    youtube = models.CharField(max_length=255, blank=True, default='')
    newsletter_title = models.CharField(max_length=200, default='Join Our Newsletter')
    newsletter_subtitle = models.CharField(max_length=300, default='Subscribe to get special offers, free giveaways, and exclusive deals.')
    newsletter_placeholder = models.CharField(max_length=100, default='Enter your email')
    newsletter_button_text = models.CharField(max_length=50, default='Subscribe')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return 'Footer settings'

    @classmethod
    def load(cls):
        """Return the settings row, creating it with defaults on first use"""
        settings_obj = cls.objects.order_by('id').first()
        if settings_obj is None:
            settings_obj = cls.objects.create()
        return settings_obj

    class Meta:
        db_table = 'footer_settings'
        verbose_name_plural = 'footer settings'


class FooterLink(models.Model):
    SECTION_CHOICES = [
        ('shop', 'Shop'),
        ('support', 'Support'),
        ('company', 'Company'),
    ]

    name = models.CharField(max_length=100)
    url = models.CharField(max_length=500)
    section = models.CharField(max_length=20, choices=SECTION_CHOICES, db_index=True)
    order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.section}: {self.name}"

    class Meta:
        db_table = 'footer_links'
        ordering = ['section', 'order', 'id']


class Announcement(models.Model):
    """Marquee announcement shown above the storefront header"""
    FONT_SIZE_CHOICES = [
        ('xs', 'Extra Small'),
        ('sm', 'Small'),
        ('base', 'Medium'),
        ('lg', 'Large'),
        ('xl', 'Extra Large'),
    ]
    PLATFORM_CHOICES = [
        ('web', 'Web Only'),
        ('mobile', 'Mobile Only'),
        ('both', 'Both'),
    ]

    text = models.CharField(max_length=300)
    description = models.TextField(blank=True)
    url = models.CharField(max_length=500, blank=True)
    icon = models.CharField(max_length=50, default='Star')
    icon_image = models.CharField(max_length=500, blank=True)
    font_size = models.CharField(max_length=10, choices=FONT_SIZE_CHOICES, default='sm')
    text_color = models.CharField(max_length=7, default='#FFFFFF')
    background_color = models.CharField(max_length=7, default='#4F46E5')
    platform = models.CharField(max_length=10, choices=PLATFORM_CHOICES, default='both')
    is_active = models.BooleanField(default=True)
    order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.text

    class Meta:
        db_table = 'announcements'
        ordering = ['order', 'id']
