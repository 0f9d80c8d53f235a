"""Django app configuration for assets app."""

from django.apps import AppConfig


class AssetsConfig(AppConfig):
    """Configuration for translation assets app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.assets'
    verbose_name = 'Translation assets'
