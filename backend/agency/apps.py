from django.apps import AppConfig


class AgencyConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    # Application name (Python path)
    name = "agency"

    def ready(self):
        """Import signals to ensure they are connected when the app is ready."""
        import logging

        logger = logging.getLogger(__name__)
        logger.debug("Agency app ready method called, importing signals...")
        import agency.signals  # noqa: F401
