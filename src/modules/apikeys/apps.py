from django.apps import AppConfig


class APIKeysConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.apikeys"
    label = "apikeys"
