from django.apps import AppConfig


class AdminpanelConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'adminpanel'
    verbose_name = 'Admin Panel'

    def ready(self):
        """Register dashboard and report procedures when app is ready"""
        import adminpanel.procedures  # noqa
