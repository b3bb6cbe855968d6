"""
Startup validation and patching.

Run once from ``TenantRouterConfig.ready()``:

    1. Validate TENANT_ROUTER_CONFIG (types, mutually exclusive options,
       routed alias present in DATABASES)
    2. Import patch modules, which apply their changes at import time
       (by default: register TenantRouter in DATABASE_ROUTERS)

Validation failures raise ImproperlyConfigured so a misconfigured project
refuses to start instead of failing on the first tenant switch.
"""

from importlib import import_module

from django.core.exceptions import ImproperlyConfigured

from .conf import settings
from .constants import constants

BOOLEAN_OPTIONS = (
    constants.USE_SCHEMAS,
    constants.PREPEND_ENVIRONMENT,
    constants.APPEND_ENVIRONMENT,
    constants.SEED_AFTER_CREATE,
    constants.MIGRATE_AFTER_CREATE,
)

LIST_OPTIONS = (
    constants.EXCLUDED_MODELS,
    constants.SEED_FIXTURES,
    constants.EXTRA_RESCUABLE_EXCEPTIONS,
)


class _BootStrapper:
    def __init__(self, conf=None):
        self.conf = conf or settings
        self._patches: list[str] = [
            "django_tenant_router.patches.settings",
        ]

    def _parse(self):
        patches = self.conf.TENANT_ROUTER_CONFIG.get(constants.PATCHES, [])

        if not isinstance(patches, (list, tuple)):
            raise ImproperlyConfigured(
                f"TENANT_ROUTER_CONFIG['{constants.PATCHES}'] must be a list of patch module paths."
            )

        for patch in patches:
            if patch not in self._patches:
                self._patches.append(patch)

    def _run_validation(self) -> None:
        config = self.conf.TENANT_ROUTER_CONFIG
        if not isinstance(config, dict):
            raise ImproperlyConfigured(f"{constants.TENANT_ROUTER_CONFIG} must be a dict.")

        for key in BOOLEAN_OPTIONS:
            if key in config and not isinstance(config[key], bool):
                raise ImproperlyConfigured(f"{constants.TENANT_ROUTER_CONFIG}['{key}'] must be True or False.")

        for key in LIST_OPTIONS:
            if key in config and not isinstance(config[key], (list, tuple)):
                raise ImproperlyConfigured(f"{constants.TENANT_ROUTER_CONFIG}['{key}'] must be a list.")

        if self.conf.PREPEND_ENVIRONMENT and self.conf.APPEND_ENVIRONMENT:
            raise ImproperlyConfigured(
                f"{constants.PREPEND_ENVIRONMENT} and {constants.APPEND_ENVIRONMENT} cannot both be enabled."
            )

        if not isinstance(config.get(constants.TENANT_DATABASES, {}), dict):
            raise ImproperlyConfigured(f"{constants.TENANT_ROUTER_CONFIG}['{constants.TENANT_DATABASES}'] must be a dict.")

        if self.conf.DB_ALIAS not in self.conf.DATABASES:
            raise ImproperlyConfigured(
                f"{constants.TENANT_ROUTER_CONFIG}['{constants.DB_ALIAS}'] refers to unknown database "
                f"'{self.conf.DB_ALIAS}'."
            )

    def _run_patches(self):
        for patch in self._patches:
            try:
                import_module(patch)
            except ImportError as e:
                raise ImproperlyConfigured(f"Unable to import patch module {patch} due to: {e}") from e

    def run(self):
        self._parse()
        self._run_validation()
        self._run_patches()


app_bootstrapper = _BootStrapper()
