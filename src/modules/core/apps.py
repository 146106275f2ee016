import atexit

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.core"
    label = "core"

    def ready(self) -> None:
        from django.conf import settings

        import modules.core.schema  # noqa: F401  registers the OpenAPI auth scheme
        from modules.core.backends import CatalogSettings, build_backends

        self.backends = build_backends(CatalogSettings.from_django(settings))
        # Django has no shutdown signal; release the store client at interpreter exit.
        atexit.register(self.backends.close)
