"""
Tenant Adapter Base Module

This module defines the contract shared by every isolation strategy:

    - create(tenant)        provision a data space, load its schema, seed it
    - drop(tenant)          tear the data space down
    - switch(tenant)        point the routed connection at a tenant
    - process(tenant, fn)   run ``fn`` as a tenant, always restoring afterwards
    - use_tenant(tenant)    the same guarantee as a context manager
    - current_tenant()      what the connection is pointed at right now
    - reset()               back to the base configuration

Concrete strategies only decide *how* to point the connection at a tenant
(``_connect_to_new``) and may extend the set of driver errors that count as
"tenant missing" or "tenant exists" (``rescue_from``).

Restore guarantee:
    ``use_tenant`` and ``process`` capture the connection's settings and the
    database (or namespace) active on it before switching, and always return
    to exactly that state on the way out, whether the switch itself or the
    caller's work failed. If returning fails, the connection is hard reset
    to the base configuration instead, and the restore failure is logged and
    discarded so that the caller sees the original error.

    ```python
    adapter.process("acme", lambda: Invoice.objects.count())

    with adapter.use_tenant("acme"):
        Invoice.objects.create(total=10)
    ```

Related:
    - database_backend.py: Database-per-tenant strategy
    - schema_backend.py: Schema-per-tenant strategy
    - ../translation.py: Driver error translation
    - ../engine.py: Connection facade
"""

import copy
import logging
from contextlib import contextmanager

from django.apps import apps
from django.db import DatabaseError, connections

from django_tenant_router import loaders
from django_tenant_router.conf import settings
from django_tenant_router.engine import ConnectionEngine
from django_tenant_router.exceptions import TenantConfigurationError
from django_tenant_router.naming import TenantNaming
from django_tenant_router.translation import (
    resolve_exceptions,
    translate_connect,
    translate_create,
    translated,
)

logger = logging.getLogger(__name__)


class BaseTenantAdapter:
    """
    Shared lifecycle logic for all isolation strategies.

    Args:
        config (dict): Base connection config (a DATABASES entry). Defaults to
            the current settings of the routed alias. A private deep copy is
            kept for the adapter's lifetime and never mutated.
        engine (ConnectionEngine): Connection facade. Defaults to one bound to
            ``conf.DB_ALIAS``.
        conf (TenantRouterSettings): Router settings. Defaults to the
            module-level settings proxy.
    """

    def __init__(self, config=None, engine=None, conf=None):
        self.conf = conf or settings
        self.engine = engine or ConnectionEngine(self.conf.DB_ALIAS, self.conf.QUERY_CACHE_ALIAS)
        self._config = copy.deepcopy(dict(config if config is not None else self.engine.config))
        self.naming = TenantNaming.from_settings(self.conf)
        self._rescuable = None

    @property
    def config(self) -> dict:
        return copy.deepcopy(self._config)

    # ========== Public API ==========

    def create(self, tenant, options=None, callback=None):
        """
        Create a tenant, import its schema and seed it if configured.

        Args:
            tenant (str): Tenant name, qualified before use
            options (dict): Merged over the base config for the create
                statement (e.g. CHARSET, COLLATION, TEMPLATE, ENCODING)
            callback (callable): Run inside the new tenant's context after
                schema import and seeding

        Raises:
            TenantAlreadyExists: The database or schema already exists
        """
        self._create_tenant(tenant, options or {})
        logger.info("Created tenant %s", self.environmentify(tenant))

        with self.use_tenant(tenant):
            self.import_database_schema(tenant)

            if self.conf.SEED_AFTER_CREATE:
                self.seed_data()

            if callback is not None:
                callback()

    def drop(self, tenant):
        """
        Drop the tenant's database or schema. The routing context is not changed.

        Raises:
            TenantNotFound: Nothing to drop under the qualified name
        """
        name = self.environmentify(tenant)
        with translated(translate_connect, name, self.rescuable_exceptions()):
            self._drop_tenant(name)
        logger.info("Dropped tenant %s", name)

    def current_tenant(self):
        return self.engine.current_database()

    def switch(self, tenant=None):
        """
        Point the routed connection at ``tenant``, or at the base configuration for None.

        Clears the query cache after every tenant switch (see
        ``ConnectionEngine.clear_query_cache``).
        """
        if tenant is None:
            self.reset()
            return

        self._connect_to_new(tenant)
        self.engine.clear_query_cache()
        logger.debug("Switched to tenant %s", tenant)

    @contextmanager
    def use_tenant(self, tenant=None):
        previous = self._capture()
        try:
            self.switch(tenant)
            yield
        finally:
            self._restore(previous)

    def process(self, tenant=None, block=None):
        """Run ``block`` as ``tenant`` and return its result, restoring the previous tenant afterwards."""
        with self.use_tenant(tenant):
            if block is not None:
                return block()
        return None

    def reset(self):
        self.engine.establish(self._config)
        logger.debug("Reset connection to %s", self._config.get("NAME"))

    def seed_data(self):
        loaders.seed_data(self, self.conf)

    seed = seed_data

    def import_database_schema(self, tenant):
        loaders.import_database_schema(self, tenant, self.conf)

    def process_excluded_models(self):
        """
        Keep excluded models on the base configuration.

        Registers the base config under SHARED_DB_ALIAS; TenantRouter sends
        reads and writes of excluded models there while every other model
        follows the routed connection.
        """
        labels = self.conf.EXCLUDED_MODELS
        if not labels:
            return

        for label in labels:
            self._get_model(label)

        alias = self.conf.SHARED_DB_ALIAS
        shared = self.config
        settings.DATABASES[alias] = shared
        # configure_settings fills in the connection defaults Django expects on every alias.
        configured = connections.configure_settings({**connections.settings, alias: copy.deepcopy(shared)})
        connections.settings[alias] = configured[alias]
        logger.debug("Excluded models %s bound to alias %s", ", ".join(labels), alias)

    # ========== Strategy hooks ==========

    def _connect_to_new(self, tenant):
        """
        Full reconnect: establish the tenant config and probe it.

        On a rescuable failure the previous config is re-established, along
        with any database selected in place on it, before TenantNotFound is
        raised, so the connection is never left pointing at a tenant that
        does not exist.
        """
        config = self.multi_tenantify(tenant)
        previous = self._capture()

        with translated(
            translate_connect,
            self.environmentify(tenant),
            self.rescuable_exceptions(),
            cleanup=lambda: self._return_to(previous),
        ):
            self.engine.establish(config)
            self.engine.is_active()

    def _create_tenant(self, tenant, options):
        name = self.environmentify(tenant)
        with translated(translate_create, name, self.rescuable_exceptions()):
            self.engine.create_database(name, {**self._config, **options})

    def _drop_tenant(self, name):
        self.engine.drop_database(name)

    def _capture(self):
        """The physical routing state: connection settings plus the database or namespace selected on it."""
        return self.engine.config, self.current_tenant()

    def _return_to(self, state):
        # Names in state are physical and are not qualified again.
        config, active = state
        if config != self.engine.config:
            self.engine.establish(config)
        if active is not None and active != self.current_tenant():
            self.engine.use_namespace(active)

    def _restore(self, state):
        try:
            self._return_to(state)
            self.engine.clear_query_cache()
        except Exception:
            logger.warning("Could not switch back to %s, resetting connection", state[1], exc_info=True)
            self.reset()

    def structure_load(self, path, tenant):
        self.engine.load_structure(path, self.multi_tenantify(tenant))

    def environmentify(self, tenant):
        return self.naming.qualify(tenant)

    def multi_tenantify(self, tenant):
        return self.naming.with_tenant_database(self._config, tenant, self.conf.TENANT_DATABASES)

    def rescue_from(self):
        """Dotted paths of driver errors this strategy also translates."""
        return []

    def rescuable_exceptions(self):
        if self._rescuable is None:
            self._rescuable = (DatabaseError,) + resolve_exceptions(
                [*self.rescue_from(), *self.conf.EXTRA_RESCUABLE_EXCEPTIONS]
            )
        return self._rescuable

    @staticmethod
    def _get_model(label):
        try:
            return apps.get_model(label)
        except (LookupError, ValueError) as exc:
            raise TenantConfigurationError(f"Excluded model '{label}' could not be found: {exc}") from exc
