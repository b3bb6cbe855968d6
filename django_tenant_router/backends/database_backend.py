"""
Database-per-Tenant Backend Module

This module implements the Database-per-Tenant isolation strategy where each
tenant gets its own database, on the same server as the base configuration
or on another one.

Switching:
    Tenants on the server the connection is already talking to are selected
    in place with ``USE`` (MySQL). Tenants on another server, and every
    tenant on engines without an in-place switch (PostgreSQL), take the full
    reconnect path: the connection is re-established with the tenant's
    config and probed.

    ```
    connect_to_new(None)  -> reset()                      -> NoTenant
    connect_to_new(T)     -> host check
                          -> same host: USE T             -> ConnectedTo(T)
                          -> other host: reconnect, probe -> ConnectedTo(T)
    ```

Tenant Configuration:
    Each tenant inherits the base config. Per-tenant overrides come from
    TENANT_ROUTER_CONFIG['TENANT_DATABASES']:

    ```python
    TENANT_ROUTER_CONFIG = {
        'TENANT_DATABASES': {
            'acme': {'HOST': 'db2.example.com', 'PASSWORD': 'secret'},
        },
    }
    ```

    A tenant whose resolved config has no HOST is a configuration error and
    fails fast with TenantConfigurationError rather than TenantNotFound.

Host Comparison:
    If comparing the tenant's host with the connection's host raises, the
    hosts are treated as different and the heavier reconnect path is taken.
"""

import logging

from django_tenant_router.exceptions import TenantConfigurationError
from django_tenant_router.translation import translate_connect, translated

from .base import BaseTenantAdapter

logger = logging.getLogger(__name__)

DRIVER_ERRORS = {
    "postgresql": ["psycopg.Error"],
    "mysql": ["MySQLdb.Error"],
    "sqlite": ["sqlite3.Error"],
}


class DatabaseTenantAdapter(BaseTenantAdapter):
    """Database-per-tenant isolation: one physical database per tenant."""

    def _connect_to_new(self, tenant):
        if tenant is None:
            self.reset()
            return

        self._check_tenant_config(tenant)
        if not self.engine.supports_in_place_switch or self._server_changed(tenant):
            super()._connect_to_new(tenant)
            return

        name = self.environmentify(tenant)
        with translated(translate_connect, name, self.rescuable_exceptions(), cleanup=self._restore_database):
            self.engine.use_namespace(name)

    def _check_tenant_config(self, tenant):
        if not self.multi_tenantify(tenant).get("HOST"):
            raise TenantConfigurationError(f"Missing database host for tenant {tenant}.")

    def _server_changed(self, tenant):
        try:
            return self.multi_tenantify(tenant)["HOST"] != self.engine.config["HOST"]
        except Exception:
            logger.warning("Could not compare hosts for tenant %s, reconnecting", tenant, exc_info=True)
            return True

    def _restore_database(self):
        # Point the statement back at whatever database the connection still records.
        current = self.current_tenant()
        if current is None:
            self.reset()
        else:
            self.engine.use_namespace(current)

    def rescue_from(self):
        return DRIVER_ERRORS.get(self.engine.vendor, [])
