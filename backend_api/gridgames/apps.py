from django.apps import AppConfig


class GridGamesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "gridgames"
    verbose_name = "Grid Games"
