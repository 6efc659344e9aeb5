# content/apps.py
from django.apps import AppConfig


class ContentConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'content'

    def ready(self):
        """Register remote procedures when app is ready"""
        import content.procedures  # noqa
