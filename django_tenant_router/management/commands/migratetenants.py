"""
Run Database Migrations for All Tenants

Django management command that runs ``migrate`` once per tenant, each time
inside that tenant's routing context.

Tenants:
    By default every name from TENANT_ROUTER_CONFIG['TENANT_NAMES'] is
    migrated. ``--tenant`` (repeatable) restricts the run to given names.

Usage:
    ```bash
    # Migrate all tenants to latest
    python manage.py migratetenants

    # Migrate specific app for all tenants
    python manage.py migratetenants billing

    # Migrate to specific migration for two tenants
    python manage.py migratetenants billing 0002 --tenant acme --tenant globex
    ```

Error Handling:
    A failing tenant is reported and the command moves on to the next one.
    The command exits with CommandError at the end if any tenant failed.
"""

from django.core.management import call_command
from django.core.management.base import BaseCommand, CommandError

from django_tenant_router import tenant as tenants


class Command(BaseCommand):
    help = "Run migrations for all tenants."

    def add_arguments(self, parser):
        parser.add_argument(
            "app_label",
            nargs="?",
            help="App label of the application to migrate.",
        )

        parser.add_argument(
            "migration_name",
            nargs="?",
            help='Target migration name (e.g., "0002", "0002_auto", or "zero").',
        )

        parser.add_argument(
            "--tenant",
            action="append",
            dest="tenants",
            help="Migrate only this tenant. May be given several times.",
        )

    def handle(self, *args, **options):
        app_label = options["app_label"]
        migration_name = options["migration_name"]
        names = options["tenants"] or tenants.tenant_names()

        migrate_args = [arg for arg in (app_label, migration_name) if arg]
        adapter = tenants.adapter()

        failed = []
        for name in names:
            self.stdout.write(self.style.MIGRATE_HEADING(f"Migrating tenant: {name}"))

            try:
                with adapter.use_tenant(name):
                    call_command(
                        "migrate",
                        *migrate_args,
                        database=adapter.engine.alias,
                        interactive=False,
                        verbosity=options["verbosity"],
                    )
            except Exception as e:
                # Keep going so one broken tenant does not block the others.
                failed.append(name)
                self.stdout.write(self.style.ERROR(f"Migrations failed for tenant '{name}': {e}"))
                continue

            self.stdout.write(self.style.SUCCESS(f"Tenant '{name}' migrated successfully."))

        if failed:
            raise CommandError(f"Migrations failed for: {', '.join(failed)}")
