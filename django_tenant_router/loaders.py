"""
Schema and seed loading for newly created tenants.

Both run inside the new tenant's routing context (see
``BaseTenantAdapter.create``) and are treated as unrecoverable: a missing
file aborts with ``SystemExit`` and any other failure propagates as-is.
"""

import io
import logging
import os
import runpy
from contextlib import redirect_stdout

from django.core.management import call_command

logger = logging.getLogger(__name__)


def _abort_if_missing(path):
    if not os.path.exists(path):
        raise SystemExit(f"{path} doesn't exist yet")


def load_or_abort(path, init_globals=None):
    _abort_if_missing(path)
    return runpy.run_path(path, init_globals=init_globals or {})


def import_database_schema(adapter, tenant, conf):
    """
    Materialise the initial table structure of ``tenant``.

    Sources, first match wins:
        1. DATABASE_STRUCTURE_FILE, when set and present on disk, loaded with
           the database's command-line client
        2. DATABASE_SCHEMA_FILE, executed as Python with ``connection`` and
           ``tenant`` in its globals
        3. ``migrate`` on the routed alias, when MIGRATE_AFTER_CREATE is set
    """
    structure_file = conf.DATABASE_STRUCTURE_FILE
    schema_file = conf.DATABASE_SCHEMA_FILE

    if structure_file and os.path.exists(structure_file):
        adapter.structure_load(structure_file, tenant)
    elif schema_file:
        logger.info("Loading schema file %s for tenant %s", schema_file, tenant)
        load_or_abort(schema_file, {"connection": adapter.engine.connection, "tenant": tenant})
    elif conf.MIGRATE_AFTER_CREATE:
        logger.info("Migrating tenant %s", tenant)
        call_command("migrate", database=adapter.engine.alias, interactive=False, verbosity=0)


def seed_data(adapter, conf):
    # Seed output is not logged.
    if conf.SEED_FIXTURES:
        call_command("loaddata", *conf.SEED_FIXTURES, database=adapter.engine.alias, verbosity=0)
    elif conf.SEED_FILE:
        with redirect_stdout(io.StringIO()):
            load_or_abort(conf.SEED_FILE, {"connection": adapter.engine.connection})
