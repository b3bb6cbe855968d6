"""
Exception taxonomy for django-tenant-router.

Two kinds of failure leave this package:

    - Domain errors (``TenantNotFound``, ``TenantAlreadyExists``) are produced
      only by ``django_tenant_router.translation`` from driver errors observed
      while creating, dropping or connecting to a tenant. They carry the
      qualified tenant identifier.
    - ``TenantConfigurationError`` signals misconfiguration (for example a
      tenant without a resolvable host). It is raised directly, never
      translated from a driver error, and never retried.

Everything else (programming errors, unexpected driver failures) propagates
unchanged.
"""

from django.core.exceptions import ImproperlyConfigured


class TenantError(Exception):
    """Base class for tenant domain errors."""

    message = "Tenant error for {tenant}."

    def __init__(self, tenant: str, message: str | None = None):
        self.tenant = tenant
        super().__init__(message or self.message.format(tenant=tenant))


class TenantNotFound(TenantError):
    message = "The tenant {tenant} cannot be found."


class TenantAlreadyExists(TenantError):
    message = "The tenant {tenant} already exists."


class TenantConfigurationError(ImproperlyConfigured):
    pass
