from django.db import connections

from .conf import settings


class TenantRouter:
    """
    Send excluded models to the shared alias under database-per-tenant.

    Every other model returns None and keeps following the routed
    connection. Under schema-per-tenant excluded models are pinned by table
    name instead, so nothing is routed here.
    """

    def _shared_alias_for(self, model):
        if settings.USE_SCHEMAS:
            return None
        if model._meta.label not in settings.EXCLUDED_MODELS:
            return None

        alias = settings.SHARED_DB_ALIAS
        # Registered once the adapter has processed excluded models.
        return alias if alias in connections else None

    def db_for_read(self, model, **hints):
        return self._shared_alias_for(model)

    def db_for_write(self, model, **hints):
        return self._shared_alias_for(model)

    def allow_migrate(self, db, app_label, model_name=None, **hints):
        if db == settings.SHARED_DB_ALIAS:
            return model_name is not None and f"{app_label}.{model_name}".lower() in {
                label.lower() for label in settings.EXCLUDED_MODELS
            }
        return None
