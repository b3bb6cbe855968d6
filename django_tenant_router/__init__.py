"""
django-tenant-router: tenant-scoped database routing for Django.

Database-per-tenant and schema-per-tenant isolation behind one adapter
contract, with guaranteed restore of the previous tenant after scoped work.
"""

from .exceptions import TenantAlreadyExists, TenantConfigurationError, TenantError, TenantNotFound

__version__ = "0.1.0"

__all__ = [
    "TenantAlreadyExists",
    "TenantConfigurationError",
    "TenantError",
    "TenantNotFound",
]
