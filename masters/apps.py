from django.apps import AppConfig


class MastersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'masters'

    def ready(self):
        # Import signal handlers
        from . import signals  # noqa: F401
