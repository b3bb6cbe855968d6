import copy

import django
import pytest
from django.conf import settings

from tests.fakes import FakeEngine

BASE_CONFIG = {
    "ENGINE": "django.db.backends.mysql",
    "NAME": "main",
    "USER": "app",
    "PASSWORD": "secret",
    "HOST": "db1",
    "PORT": "3306",
    "OPTIONS": {},
}


def pytest_configure():
    settings.configure(
        DATABASES={
            "default": {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"},
        },
        INSTALLED_APPS=["django_tenant_router", "tests.testapp"],
        TENANT_ROUTER_CONFIG={"EXCLUDED_MODELS": ["testapp.Company"]},
        DEFAULT_AUTO_FIELD="django.db.models.AutoField",
        USE_TZ=True,
    )
    django.setup()


@pytest.fixture
def base_config():
    return copy.deepcopy(BASE_CONFIG)


@pytest.fixture
def servers():
    return {"db1": {"main"}, "db2": set()}


@pytest.fixture
def engine(base_config, servers):
    return FakeEngine(base_config, servers=servers)


@pytest.fixture
def make_conf():
    from django_tenant_router.conf import TenantRouterSettings

    def _make(**config):
        return TenantRouterSettings({"ENVIRONMENT": "test", **config})

    return _make


@pytest.fixture
def make_adapter(engine, base_config, make_conf):
    from django_tenant_router.backends import DatabaseTenantAdapter

    def _make(adapter_class=DatabaseTenantAdapter, **config):
        return adapter_class(config=base_config, engine=engine, conf=make_conf(**config))

    return _make


@pytest.fixture
def restore_db_tables():
    from django.apps import apps

    models = apps.get_app_config("testapp").get_models()
    original = {model: model._meta.db_table for model in models}
    yield
    for model, db_table in original.items():
        model._meta.db_table = db_table


@pytest.fixture
def shared_alias():
    from django.db import connections

    from django_tenant_router.conf import settings as router_settings

    alias = router_settings.SHARED_DB_ALIAS
    yield alias
    router_settings.DATABASES.pop(alias, None)
    connections.settings.pop(alias, None)


@pytest.fixture
def install_adapter():
    from django_tenant_router import tenant

    def _install(adapter):
        tenant.reload(adapter)
        return adapter

    yield _install
    tenant.reload()
