from django.apps import AppConfig


class GalleryConfig(AppConfig):
    name = 'gallery'
    default_auto_field = 'django.db.models.BigAutoField'

    def ready(self):
        """Import signals when the app is ready"""
        import gallery.signals  # noqa: F401
