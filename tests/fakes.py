"""In-memory stand-in for ConnectionEngine used across the test suite."""

import copy
from types import SimpleNamespace

from django.db import OperationalError, ProgrammingError


class FakeEngine:
    """
    Servers are modelled as ``{host: {database names}}``.

    Like a Django connection, establishing a config does not connect; the
    connection opens on the next statement or probe and fails there if the
    configured database does not exist on the configured host.
    """

    vendor = "fake"

    def __init__(self, config, servers=None, supports_in_place_switch=True):
        self.alias = "default"
        self.settings_dict = copy.deepcopy(config)
        self.servers = servers if servers is not None else {config["HOST"]: {config["NAME"]}}
        self.supports_in_place_switch = supports_in_place_switch
        self.connection = SimpleNamespace(seen=[])

        self.connected = False
        self.database = None
        self.statements = []
        self.connects = 0
        self.probes = 0
        self.cache_clears = 0
        self.loaded = []

    @property
    def config(self):
        return copy.deepcopy(self.settings_dict)

    @property
    def host(self):
        return self.settings_dict["HOST"]

    def _connect(self):
        if self.connected:
            return
        name = self.settings_dict["NAME"]
        if name not in self.servers.get(self.host, set()):
            raise OperationalError(f"Unknown database '{name}' on {self.host}")
        self.connected = True
        self.database = name
        self.connects += 1

    def establish(self, config):
        self.settings_dict = copy.deepcopy(config)
        self.connected = False
        self.database = None

    def is_active(self):
        self.probes += 1
        self._connect()
        return True

    def current_database(self):
        self._connect()
        return self.database

    def current_schema(self):
        return self.current_database()

    def use_namespace(self, name):
        self._connect()
        self.statements.append(f"USE `{name}`")
        if name not in self.servers[self.host]:
            raise ProgrammingError(f"Unknown database '{name}'")
        self.database = name

    def create_database(self, name, config=None):
        self._connect()
        self.statements.append(f"CREATE DATABASE `{name}`")
        databases = self.servers.setdefault(self.host, set())
        if name in databases:
            raise ProgrammingError(f"Can't create database '{name}'; database exists")
        databases.add(name)

    create_schema = create_database

    def drop_database(self, name):
        self._connect()
        self.statements.append(f"DROP DATABASE `{name}`")
        databases = self.servers.get(self.host, set())
        if name not in databases:
            raise ProgrammingError(f"Can't drop database '{name}'; database doesn't exist")
        databases.discard(name)

    drop_schema = drop_database

    def clear_query_cache(self):
        self.cache_clears += 1

    def qualify_table(self, namespace, table):
        return f"{namespace}`.`{table}"

    def unqualify_table(self, db_table):
        return db_table.split("`.`", 1)[-1]

    def load_structure(self, path, config, schema=None):
        self.loaded.append((path, config["NAME"], schema))


def tenant_names():
    return ["acme", "globex"]
