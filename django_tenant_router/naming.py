"""
Tenant identifier policy.

Turns a logical tenant name into the physical database or schema name used
against the connection, optionally qualified with the deployment environment
so that several environments can share one database server::

    >>> TenantNaming("staging", prepend_environment=True).qualify("acme")
    'staging_acme'

Qualification is idempotent: a name that already contains the environment tag
is returned unchanged.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass

from requests.structures import CaseInsensitiveDict

from .exceptions import TenantConfigurationError


@dataclass(frozen=True)
class TenantNaming:
    environment: str
    prepend_environment: bool = False
    append_environment: bool = False

    def __post_init__(self):
        if self.prepend_environment and self.append_environment:
            raise TenantConfigurationError(
                "PREPEND_ENVIRONMENT and APPEND_ENVIRONMENT cannot both be enabled."
            )

    @classmethod
    def from_settings(cls, conf) -> "TenantNaming":
        return cls(
            environment=conf.ENVIRONMENT,
            prepend_environment=conf.PREPEND_ENVIRONMENT,
            append_environment=conf.APPEND_ENVIRONMENT,
        )

    def qualify(self, tenant: str) -> str:
        if not isinstance(tenant, str) or not tenant:
            raise ValueError(f"Tenant name must be a non-empty string, got {tenant!r}")

        if self.environment in tenant:
            return tenant
        if self.prepend_environment:
            return f"{self.environment}_{tenant}"
        if self.append_environment:
            return f"{tenant}_{self.environment}"
        return tenant

    def with_tenant_database(self, base_config: dict, tenant: str, overrides: dict | None = None) -> dict:
        """
        Build the connection config for ``tenant``.

        Returns a deep copy of ``base_config`` with the tenant's override entry
        merged in and NAME replaced by the qualified tenant name. Override keys
        match base keys case-insensitively ('host' overrides 'HOST') and the
        base key spelling is kept. ``base_config`` itself is never modified.
        """
        qualified = self.qualify(tenant)
        config = copy.deepcopy(dict(base_config))

        overrides = overrides or {}
        tenant_overrides = overrides.get(tenant) or overrides.get(qualified) or {}

        keys = CaseInsensitiveDict({key: key for key in config})
        for key, value in tenant_overrides.items():
            config[keys.get(key, key.upper())] = copy.deepcopy(value)

        config[keys.get("NAME", "NAME")] = qualified
        return config
