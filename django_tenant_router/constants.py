class _Constants:
    """Keys recognised inside the ``TENANT_ROUTER_CONFIG`` Django setting."""

    TENANT_ROUTER_CONFIG = "TENANT_ROUTER_CONFIG"

    DB_ALIAS = "DB_ALIAS"
    USE_SCHEMAS = "USE_SCHEMAS"
    DEFAULT_SCHEMA = "DEFAULT_SCHEMA"
    ENVIRONMENT = "ENVIRONMENT"
    PREPEND_ENVIRONMENT = "PREPEND_ENVIRONMENT"
    APPEND_ENVIRONMENT = "APPEND_ENVIRONMENT"
    SEED_AFTER_CREATE = "SEED_AFTER_CREATE"
    SEED_FILE = "SEED_FILE"
    SEED_FIXTURES = "SEED_FIXTURES"
    MIGRATE_AFTER_CREATE = "MIGRATE_AFTER_CREATE"
    DATABASE_STRUCTURE_FILE = "DATABASE_STRUCTURE_FILE"
    DATABASE_SCHEMA_FILE = "DATABASE_SCHEMA_FILE"
    EXCLUDED_MODELS = "EXCLUDED_MODELS"
    TENANT_DATABASES = "TENANT_DATABASES"
    TENANT_NAMES = "TENANT_NAMES"
    EXTRA_RESCUABLE_EXCEPTIONS = "EXTRA_RESCUABLE_EXCEPTIONS"
    QUERY_CACHE_ALIAS = "QUERY_CACHE_ALIAS"
    SHARED_DB_ALIAS = "SHARED_DB_ALIAS"
    PATCHES = "PATCHES"

    ENVIRONMENT_VARIABLE = "DJANGO_ENV"
    DEFAULT_ENVIRONMENT = "development"


constants = _Constants()
