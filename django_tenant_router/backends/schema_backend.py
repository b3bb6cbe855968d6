"""
Schema-per-Tenant Backend Module

All tenants share one connection; switching only changes its active
namespace (``USE`` on MySQL, ``SET search_path`` on PostgreSQL).

The default namespace is captured when the adapter is built (DEFAULT_SCHEMA,
else ``public`` on PostgreSQL and the NAME of the base config elsewhere) and
the connection is pointed at it straight away. It is the target of every
reset, including the one performed when a switch to a missing namespace
fails, so the shared connection never stays on a namespace that does not
exist.

Excluded Models:
    Models listed in EXCLUDED_MODELS have their table pinned to the default
    namespace once, when excluded models are processed:

    ```python
    # default namespace 'main', Company in EXCLUDED_MODELS
    Company._meta.db_table  # 'main`.`accounts_company' on MySQL
    ```
"""

import logging

from django_tenant_router.translation import translate_connect, translate_create, translated

from .base import BaseTenantAdapter

logger = logging.getLogger(__name__)


class SchemaTenantAdapter(BaseTenantAdapter):
    """Schema-per-tenant isolation on a single shared connection."""

    def __init__(self, config=None, engine=None, conf=None):
        super().__init__(config, engine, conf)
        self.default_tenant = self.conf.DEFAULT_SCHEMA or self._default_namespace()
        self.reset()

    def _default_namespace(self):
        # A PostgreSQL database name is not a schema; shared tables live in public.
        if self.engine.vendor == "postgresql":
            return "public"
        return self._config["NAME"]

    def reset(self):
        self.engine.use_namespace(self.default_tenant)
        logger.debug("Reset namespace to %s", self.default_tenant)

    def current_tenant(self):
        return self.engine.current_schema()

    def process_excluded_models(self):
        for label in self.conf.EXCLUDED_MODELS:
            model = self._get_model(label)
            table = self.engine.unqualify_table(model._meta.db_table)
            model._meta.db_table = self.engine.qualify_table(self.default_tenant, table)
            logger.debug("Pinned %s to %s", label, model._meta.db_table)

    def structure_load(self, path, tenant):
        self.engine.load_structure(path, self._config, schema=self.environmentify(tenant))

    def _connect_to_new(self, tenant):
        if tenant is None:
            self.reset()
            return

        name = self.environmentify(tenant)
        with translated(translate_connect, name, self.rescuable_exceptions(), cleanup=self.reset):
            self.engine.use_namespace(name)

    def _create_tenant(self, tenant, options):
        name = self.environmentify(tenant)
        with translated(translate_create, name, self.rescuable_exceptions()):
            self.engine.create_schema(name, {**self._config, **options})

    def _drop_tenant(self, name):
        self.engine.drop_schema(name)
