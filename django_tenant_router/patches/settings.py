"""Append TenantRouter to DATABASE_ROUTERS so excluded models reach the shared alias."""

from django.conf import settings
from django.db import router

TENANT_ROUTER = "django_tenant_router.routers.TenantRouter"


def register_tenant_router():
    routers = list(getattr(settings, "DATABASE_ROUTERS", []))
    if TENANT_ROUTER in routers:
        return

    # Project routers stay first; TenantRouter only answers for excluded models.
    routers.append(TENANT_ROUTER)
    setattr(settings, "DATABASE_ROUTERS", routers)

    # ConnectionRouter caches the router list on first use.
    router.__dict__.pop("routers", None)


register_tenant_router()
