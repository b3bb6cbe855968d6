"""
Configuration Management for django-tenant-router

This module wraps Django's settings object and exposes the tenant routing
configuration with sensible defaults.

The module implements a settings proxy pattern that:
    - Allows transparent access to all Django settings
    - Provides cached properties for tenant-router-specific configuration
    - Refuses runtime reassignment of already-read values

Configuration Source:
    All configuration is read from Django's TENANT_ROUTER_CONFIG setting:

    ```python
    TENANT_ROUTER_CONFIG = {
        'USE_SCHEMAS': False,
        'PREPEND_ENVIRONMENT': True,
        'ENVIRONMENT': 'staging',
        'SEED_AFTER_CREATE': True,
        'SEED_FIXTURES': ['initial_plans'],
        'DATABASE_STRUCTURE_FILE': BASE_DIR / 'db' / 'structure.sql',
        'EXCLUDED_MODELS': ['accounts.Company'],
        'TENANT_DATABASES': {
            'acme': {'HOST': 'db2.internal'},
        },
        'TENANT_NAMES': 'accounts.tenancy.tenant_names',
    }
    ```

Usage:
    ```python
    from django_tenant_router.conf import settings

    if settings.USE_SCHEMAS:
        ...
    debug_mode = settings.DEBUG  # proxied to django.conf.settings
    ```

Testing:
    A TenantRouterSettings instance may be built with an explicit config dict,
    which then takes the place of TENANT_ROUTER_CONFIG:

    ```python
    conf = TenantRouterSettings({'USE_SCHEMAS': True})
    ```
"""

from __future__ import annotations

import os

from django.conf import settings as django_settings
from django.utils.functional import cached_property

from .constants import constants


class TenantRouterSettings:
    """
    Proxy class that wraps Django's settings object with tenant routing configuration.

    Standard Django settings are proxied through ``__getattr__``; router
    settings are cached properties computed from TENANT_ROUTER_CONFIG (or the
    explicit ``config`` passed at construction).
    """

    def __init__(self, config: dict | None = None):
        self.__dict__["_explicit_config"] = config

    def __getattr__(self, item):
        return getattr(django_settings, item)

    def __setattr__(self, key, value):
        """Prevent reassignment of values that have already been read and cached."""
        if key in self.__dict__:
            raise ValueError("Item assignment is not supported")

        setattr(django_settings, key, value)

    @cached_property
    def TENANT_ROUTER_CONFIG(self) -> dict:
        """
        The root configuration dictionary.

        Returns the explicit config passed to the constructor if there is one,
        otherwise ``settings.TENANT_ROUTER_CONFIG`` or ``{}`` when undefined.
        """
        explicit = self.__dict__["_explicit_config"]
        if explicit is not None:
            return explicit
        return getattr(django_settings, constants.TENANT_ROUTER_CONFIG, {})

    @cached_property
    def DB_ALIAS(self) -> str:
        """Alias in DATABASES whose connection is routed between tenants."""
        return self.TENANT_ROUTER_CONFIG.get(constants.DB_ALIAS, "default")

    @cached_property
    def USE_SCHEMAS(self) -> bool:
        """
        Select the isolation strategy.

        False (default): database-per-tenant, every tenant owns a physical
        database and switching reconnects.
        True: schema-per-tenant, tenants share one connection and switching
        changes the active namespace.
        """
        return self.TENANT_ROUTER_CONFIG.get(constants.USE_SCHEMAS, False)

    @cached_property
    def DEFAULT_SCHEMA(self) -> str | None:
        """
        Namespace to return to on reset when using schemas.

        Defaults to None, meaning ``public`` on PostgreSQL and the NAME of the
        base database config elsewhere.
        """
        return self.TENANT_ROUTER_CONFIG.get(constants.DEFAULT_SCHEMA)

    @cached_property
    def ENVIRONMENT(self) -> str:
        """
        Environment tag used to qualify tenant names.

        Resolution order: TENANT_ROUTER_CONFIG['ENVIRONMENT'], the DJANGO_ENV
        environment variable, then 'development'.
        """
        return self.TENANT_ROUTER_CONFIG.get(
            constants.ENVIRONMENT,
            os.environ.get(constants.ENVIRONMENT_VARIABLE, constants.DEFAULT_ENVIRONMENT),
        )

    @cached_property
    def PREPEND_ENVIRONMENT(self) -> bool:
        return self.TENANT_ROUTER_CONFIG.get(constants.PREPEND_ENVIRONMENT, False)

    @cached_property
    def APPEND_ENVIRONMENT(self) -> bool:
        return self.TENANT_ROUTER_CONFIG.get(constants.APPEND_ENVIRONMENT, False)

    @cached_property
    def SEED_AFTER_CREATE(self) -> bool:
        return self.TENANT_ROUTER_CONFIG.get(constants.SEED_AFTER_CREATE, False)

    @cached_property
    def SEED_FILE(self) -> str | None:
        """Python file executed (output suppressed) to seed a new tenant."""
        return self.TENANT_ROUTER_CONFIG.get(constants.SEED_FILE)

    @cached_property
    def SEED_FIXTURES(self) -> list[str]:
        """Fixture labels passed to ``loaddata`` to seed a new tenant. Takes precedence over SEED_FILE."""
        return list(self.TENANT_ROUTER_CONFIG.get(constants.SEED_FIXTURES, []))

    @cached_property
    def MIGRATE_AFTER_CREATE(self) -> bool:
        """Run ``migrate`` for a new tenant when no structure or schema file is configured."""
        return self.TENANT_ROUTER_CONFIG.get(constants.MIGRATE_AFTER_CREATE, False)

    @cached_property
    def DATABASE_STRUCTURE_FILE(self) -> str | None:
        """
        SQL dump loaded into every new tenant through the database's command-line client.

        Tried first. Ignored when the file does not exist.
        """
        value = self.TENANT_ROUTER_CONFIG.get(constants.DATABASE_STRUCTURE_FILE)
        return os.fspath(value) if value else None

    @cached_property
    def DATABASE_SCHEMA_FILE(self) -> str | None:
        """Python file defining the schema programmatically. Tried after DATABASE_STRUCTURE_FILE."""
        value = self.TENANT_ROUTER_CONFIG.get(constants.DATABASE_SCHEMA_FILE)
        return os.fspath(value) if value else None

    @cached_property
    def EXCLUDED_MODELS(self) -> list[str]:
        """
        Models that opt out of tenant isolation, as 'app_label.ModelName'.

        Under database-per-tenant they are routed to SHARED_DB_ALIAS; under
        schema-per-tenant their table is pinned to the default namespace.
        """
        return list(self.TENANT_ROUTER_CONFIG.get(constants.EXCLUDED_MODELS, []))

    @cached_property
    def TENANT_DATABASES(self) -> dict:
        """
        Per-tenant connection overrides keyed by tenant name.

        Values are partial DATABASES entries merged over the base config,
        most commonly to place a tenant on another HOST.
        """
        return dict(self.TENANT_ROUTER_CONFIG.get(constants.TENANT_DATABASES, {}))

    @cached_property
    def TENANT_NAMES(self):
        """A list of tenant names, or a dotted path to a callable returning one."""
        return self.TENANT_ROUTER_CONFIG.get(constants.TENANT_NAMES, [])

    @cached_property
    def EXTRA_RESCUABLE_EXCEPTIONS(self) -> list[str]:
        """Dotted paths of additional driver errors translated into tenant errors."""
        return list(self.TENANT_ROUTER_CONFIG.get(constants.EXTRA_RESCUABLE_EXCEPTIONS, []))

    @cached_property
    def QUERY_CACHE_ALIAS(self) -> str | None:
        """Django cache alias cleared after every tenant switch, if any."""
        return self.TENANT_ROUTER_CONFIG.get(constants.QUERY_CACHE_ALIAS)

    @cached_property
    def SHARED_DB_ALIAS(self) -> str:
        return self.TENANT_ROUTER_CONFIG.get(constants.SHARED_DB_ALIAS, "tenant_router_shared")


settings = TenantRouterSettings()
