"""
Connection Engine

A thin facade over one alias of ``django.db.connections``. Tenant adapters
never touch the Django connection directly; everything they need (run a
statement, reconnect with another config, report the active database or
namespace, create and drop databases) goes through this class, which keeps
the vendor-specific SQL in one place.

Routing state lives on the Django connection object itself:

    - ``establish(config)`` closes the connection and swaps its
      ``settings_dict``; Django reconnects lazily with the new parameters on
      the next query.
    - ``use_namespace(name)`` changes the active namespace of the open
      connection (``USE`` on MySQL, ``SET search_path`` on PostgreSQL).

Django keeps one connection object per alias per thread, so each worker
thread routes independently.

Supported vendors:
    - mysql: in-place database switch, schema == database
    - postgresql: reconnect for databases, search_path for schemas
    - anything else: reconnect only; namespace switching is refused
"""

import copy
import logging
import os
import subprocess

from django.core.cache import caches
from django.db import ProgrammingError, connections

from .exceptions import TenantConfigurationError

logger = logging.getLogger(__name__)

CURRENT_DATABASE_SQL = {
    "mysql": "SELECT DATABASE()",
    "postgresql": "SELECT current_database()",
}

CURRENT_SCHEMA_SQL = {
    "mysql": "SELECT DATABASE()",
    "postgresql": "SELECT current_schema()",
}

# Joined with the table name so that quote_name() renders `ns`.`table` / "ns"."table".
TABLE_SEPARATORS = {
    "mysql": "`.`",
    "postgresql": '"."',
}

CLIENT_PARAMETERS = {
    "mysql": ["--init-command=SET FOREIGN_KEY_CHECKS=0"],
    "postgresql": ["-q", "-v", "ON_ERROR_STOP=1"],
}


class ConnectionEngine:
    def __init__(self, alias: str = "default", cache_alias: str | None = None):
        self.alias = alias
        self.cache_alias = cache_alias

    @property
    def connection(self):
        return connections[self.alias]

    @property
    def config(self) -> dict:
        """A copy of the settings the connection currently uses."""
        return copy.deepcopy(self.connection.settings_dict)

    @property
    def vendor(self) -> str:
        return self.connection.vendor

    @property
    def supports_in_place_switch(self) -> bool:
        """Whether another database on the same server can be selected without reconnecting."""
        return self.vendor == "mysql"

    def quote_name(self, name: str) -> str:
        return self.connection.ops.quote_name(name)

    def execute(self, sql: str, params=None):
        with self.connection.cursor() as cursor:
            cursor.execute(sql, params)
            if cursor.description:
                return cursor.fetchall()
        return None

    def _fetch_value(self, sql: str):
        rows = self.execute(sql)
        return rows[0][0] if rows else None

    def establish(self, config: dict) -> None:
        connection = self.connection
        connection.close()
        connection.settings_dict = copy.deepcopy(dict(config))
        logger.debug("Connection '%s' now configured for database %s", self.alias, config.get("NAME"))

    def is_active(self) -> bool:
        """Open the connection if needed and check that it answers."""
        connection = self.connection
        connection.ensure_connection()
        return connection.is_usable()

    def current_database(self):
        sql = CURRENT_DATABASE_SQL.get(self.vendor)
        if sql is None:
            return self.connection.settings_dict.get("NAME")
        return self._fetch_value(sql)

    def current_schema(self):
        sql = CURRENT_SCHEMA_SQL.get(self.vendor)
        if sql is None:
            return self.connection.settings_dict.get("NAME")
        return self._fetch_value(sql)

    def use_namespace(self, name: str) -> None:
        vendor = self.vendor
        if vendor == "mysql":
            self.execute(f"USE {self.quote_name(name)}")
        elif vendor == "postgresql":
            # search_path accepts schemas that do not exist, so check first.
            if not self.execute("SELECT 1 FROM pg_namespace WHERE nspname = %s", [name]):
                raise ProgrammingError(f'schema "{name}" does not exist')
            self.execute(f"SET search_path TO {self.quote_name(name)}")
        else:
            raise TenantConfigurationError(f"The {vendor} backend does not support switching namespaces.")

    def create_database(self, name: str, config: dict | None = None) -> None:
        config = config or {}
        sql = f"CREATE DATABASE {self.quote_name(name)}"
        if self.vendor == "mysql":
            if config.get("CHARSET"):
                sql += f" CHARACTER SET {config['CHARSET']}"
            if config.get("COLLATION"):
                sql += f" COLLATE {config['COLLATION']}"
        elif self.vendor == "postgresql":
            if config.get("TEMPLATE"):
                sql += f" TEMPLATE {self.quote_name(config['TEMPLATE'])}"
            if config.get("ENCODING"):
                sql += f" ENCODING '{config['ENCODING']}'"
        self.execute(sql)

    def drop_database(self, name: str) -> None:
        self.execute(f"DROP DATABASE {self.quote_name(name)}")

    def create_schema(self, name: str, config: dict | None = None) -> None:
        if self.vendor == "postgresql":
            self.execute(f"CREATE SCHEMA {self.quote_name(name)}")
        else:
            self.create_database(name, config)

    def drop_schema(self, name: str) -> None:
        if self.vendor == "postgresql":
            self.execute(f"DROP SCHEMA {self.quote_name(name)} CASCADE")
        else:
            self.drop_database(name)

    def clear_query_cache(self) -> None:
        """
        Drop per-connection query state after a tenant switch.

        ``queries_log`` is only Django's DEBUG log of executed statements;
        clearing it keeps the log from mixing tenants. Cached query results
        are only kept from crossing tenants by the cache named in
        QUERY_CACHE_ALIAS, which is cleared here when configured.
        """
        self.connection.queries_log.clear()
        if self.cache_alias:
            caches[self.cache_alias].clear()

    def qualify_table(self, namespace: str, table: str) -> str:
        return f"{namespace}{TABLE_SEPARATORS.get(self.vendor, '.')}{table}"

    def unqualify_table(self, db_table: str) -> str:
        return db_table.split(TABLE_SEPARATORS.get(self.vendor, "."), 1)[-1]

    def load_structure(self, path: str, config: dict, schema: str | None = None) -> None:
        """
        Feed an SQL dump to the vendor's command-line client.

        The client is built by Django (``connection.client``) from ``config``.
        With ``schema`` the dump is loaded into that namespace: through
        PGOPTIONS on PostgreSQL, as the target database elsewhere.
        A failing client raises ``subprocess.CalledProcessError``.
        """
        settings_dict = copy.deepcopy(dict(config))
        extra_env = {}
        if schema is not None:
            if self.vendor == "postgresql":
                extra_env["PGOPTIONS"] = f"-c search_path={schema}"
            else:
                settings_dict["NAME"] = schema

        client = self.connection.client
        args, env = client.settings_to_cmd_args_env(settings_dict, CLIENT_PARAMETERS.get(self.vendor, []))
        env = {**os.environ, **(env or {}), **extra_env}

        logger.info("Loading %s into %s", path, schema or settings_dict.get("NAME"))
        with open(path, "rb") as structure:
            subprocess.run(args, stdin=structure, env=env, check=True)
