from django.apps import AppConfig


class ContentConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'storefront.content'

    def ready(self):
        """Import signals when app is ready"""
        import storefront.content.cache  # noqa: F401  # Cache invalidation signals
