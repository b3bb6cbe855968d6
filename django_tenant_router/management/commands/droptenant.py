from django.core.management.base import BaseCommand, CommandError

from django_tenant_router import tenant as tenants
from django_tenant_router.exceptions import TenantError


class Command(BaseCommand):
    help = "Drop a tenant database or schema. This cannot be undone."

    def add_arguments(self, parser):
        parser.add_argument("name", help="Tenant name.")
        parser.add_argument(
            "--no-input",
            "--noinput",
            action="store_false",
            dest="interactive",
            help="Do not prompt for confirmation.",
        )

    def handle(self, *args, **options):
        adapter = tenants.adapter()
        name = adapter.environmentify(options["name"])

        if options["interactive"]:
            answer = input(f"Type '{name}' to permanently drop this tenant: ")
            if answer != name:
                raise CommandError("Drop cancelled.")

        try:
            adapter.drop(options["name"])
        except TenantError as e:
            raise CommandError(str(e)) from e

        self.stdout.write(self.style.SUCCESS(f"Tenant '{name}' dropped."))
