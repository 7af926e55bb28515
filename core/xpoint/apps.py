from django.apps import AppConfig


class XpointConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "xpoint"
