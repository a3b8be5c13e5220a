from django.apps import AppConfig


class PlacementsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'placements'
    verbose_name = 'Field Experience Placements'

    def ready(self):
        from . import signals  # noqa: F401
