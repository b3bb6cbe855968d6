"""
Process-wide tenant API.

Module-level shortcuts to one adapter built lazily from settings, for host
code that does not want to carry an adapter around:

    ```python
    from django_tenant_router import tenant

    tenant.create("acme")
    with tenant.use_tenant("acme"):
        Invoice.objects.create(total=10)
    tenant.drop("acme")
    ```

The adapter is created on first use, and excluded models are processed at
that point. ``reload()`` discards it so the next call rebuilds it from the
current settings.
"""

import threading

from django.utils.module_loading import import_string

from .backends import get_tenant_adapter
from .conf import settings

_adapter = None
_lock = threading.Lock()


def adapter():
    global _adapter
    if _adapter is None:
        with _lock:
            if _adapter is None:
                built = get_tenant_adapter(settings)
                built.process_excluded_models()
                _adapter = built
    return _adapter


def init():
    """Build the adapter now instead of on first use."""
    return adapter()


def reload(new_adapter=None):
    global _adapter
    with _lock:
        _adapter = new_adapter


def create(tenant, options=None, callback=None):
    return adapter().create(tenant, options, callback)


def drop(tenant):
    return adapter().drop(tenant)


def switch(tenant=None):
    return adapter().switch(tenant)


def process(tenant=None, block=None):
    return adapter().process(tenant, block)


def use_tenant(tenant=None):
    return adapter().use_tenant(tenant)


def current_tenant():
    return adapter().current_tenant()


def reset():
    return adapter().reset()


def seed():
    return adapter().seed_data()


def tenant_names(conf=None):
    """Configured tenant names; TENANT_NAMES may be a list or a dotted path to a callable."""
    names = (conf or settings).TENANT_NAMES
    if isinstance(names, str):
        names = import_string(names)()
    return list(names)
