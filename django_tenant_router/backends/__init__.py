from .base import BaseTenantAdapter
from .database_backend import DatabaseTenantAdapter
from .schema_backend import SchemaTenantAdapter


def get_tenant_adapter(conf=None, config=None, engine=None) -> BaseTenantAdapter:
    """Build the adapter for the configured isolation strategy (USE_SCHEMAS)."""
    from django_tenant_router.conf import settings

    conf = conf or settings
    adapter_class = SchemaTenantAdapter if conf.USE_SCHEMAS else DatabaseTenantAdapter
    return adapter_class(config=config, engine=engine, conf=conf)


__all__ = [
    "BaseTenantAdapter",
    "DatabaseTenantAdapter",
    "SchemaTenantAdapter",
    "get_tenant_adapter",
]
