"""
Create a tenant: its database (or schema), initial structure and seed data.

Usage:
    ```bash
    python manage.py createtenant acme
    python manage.py createtenant acme --charset utf8mb4 --collation utf8mb4_unicode_ci
    ```
"""

from django.core.management.base import BaseCommand, CommandError

from django_tenant_router import tenant as tenants
from django_tenant_router.exceptions import TenantError


class Command(BaseCommand):
    help = "Create a tenant database or schema and load its structure."

    def add_arguments(self, parser):
        parser.add_argument("name", help="Tenant name, qualified with the environment if configured.")
        parser.add_argument("--charset", help="CHARACTER SET for the new MySQL database.")
        parser.add_argument("--collation", help="COLLATE for the new MySQL database.")
        parser.add_argument("--template", help="TEMPLATE for the new PostgreSQL database.")
        parser.add_argument("--encoding", help="ENCODING for the new PostgreSQL database.")

    def handle(self, *args, **options):
        create_options = {
            key.upper(): options[key]
            for key in ("charset", "collation", "template", "encoding")
            if options[key]
        }

        adapter = tenants.adapter()
        try:
            adapter.create(options["name"], create_options)
        except TenantError as e:
            raise CommandError(str(e)) from e

        self.stdout.write(self.style.SUCCESS(f"Tenant '{adapter.environmentify(options['name'])}' created."))
