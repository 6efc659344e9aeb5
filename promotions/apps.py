# promotions/apps.py
from django.apps import AppConfig


class PromotionsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'promotions'

    def ready(self):
        """Register remote procedures when app is ready"""
        import promotions.procedures  # noqa
