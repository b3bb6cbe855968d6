"""
Translation of driver-level failures into tenant domain errors.

Only errors whose class is in the adapter's *rescuable* set are translated;
anything else (programming errors, configuration errors, unexpected driver
failures) is re-raised untouched so it is never silently reclassified.

The rescuable set is data: the base entry is Django's ``DatabaseError`` and
strategies or deployments add driver classes by dotted path::

    rescuable = (DatabaseError,) + resolve_exceptions(["psycopg.Error"])

    with translated(translate_connect, "staging_acme", rescuable):
        engine.establish(config)
        engine.is_active()
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterable

from django.utils.module_loading import import_string

from .exceptions import TenantAlreadyExists, TenantConfigurationError, TenantError, TenantNotFound

ExceptionClasses = tuple[type[BaseException], ...]


def resolve_exceptions(paths: Iterable[str]) -> ExceptionClasses:
    classes = []
    for path in paths:
        try:
            cls = import_string(path)
        except ImportError as exc:
            raise TenantConfigurationError(f"Could not import rescuable exception '{path}': {exc}") from exc
        if not (isinstance(cls, type) and issubclass(cls, BaseException)):
            raise TenantConfigurationError(f"'{path}' is not an exception class.")
        classes.append(cls)
    return tuple(classes)


def _translate(error: BaseException, rescuable: ExceptionClasses, error_class: type[TenantError], tenant: str):
    if not isinstance(error, rescuable):
        raise error
    return error_class(tenant)


def translate_create(error: BaseException, tenant: str, rescuable: ExceptionClasses) -> TenantError:
    return _translate(error, rescuable, TenantAlreadyExists, tenant)


def translate_connect(error: BaseException, tenant: str, rescuable: ExceptionClasses) -> TenantError:
    return _translate(error, rescuable, TenantNotFound, tenant)


@contextmanager
def translated(
    translator: Callable[[BaseException, str, ExceptionClasses], TenantError],
    tenant: str,
    rescuable: ExceptionClasses,
    cleanup: Callable[[], object] | None = None,
):
    """
    Translate rescuable errors raised inside the block.

    ``cleanup`` runs only for rescuable errors, after classification and
    before the domain error is raised. The domain error is chained to the
    driver error.
    """
    try:
        yield
    except Exception as exc:
        error = translator(exc, tenant, rescuable)
        if cleanup is not None:
            cleanup()
        raise error from exc
