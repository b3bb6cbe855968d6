from django.apps import AppConfig


class TenantRouterConfig(AppConfig):
    name = "django_tenant_router"
    verbose_name = "Tenant Router"

    def ready(self):
        from .bootstrap import app_bootstrapper

        app_bootstrapper.run()
