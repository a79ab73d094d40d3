"""
Cache invalidation signals
Automatically invalidate cache when data changes
"""
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging
import threading
from contextlib import contextmanager

from .cache_utils import invalidate_reference_cache, invalidate_dashboard_cache

logger = logging.getLogger(__name__)

# Thread-local storage to track signal suspension
_thread_locals = threading.local()

REFERENCE_MODELS = {
    'Country', 'State', 'City', 'Port',
    'Make', 'VehicleModel', 'Auction', 'Status', 'User',
}
DASHBOARD_MODELS = {
    'User', 'Vehicle', 'VehicleStatusHistory', 'Invoice', 'BalanceRequest', 'Status',
}


@contextmanager
def suspend_cache_signals():
    """
    Context manager to temporarily suspend cache invalidation signals.
    Useful for bulk operations (seeding) to prevent excessive cache clearing.
    Remember to manually invalidate cache after the block!
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


@receiver([post_save, post_delete])
def invalidate_reference_options(sender, instance, **kwargs):
    """Invalidate option lists when reference data (or dealers) change"""
    if is_suspended() or sender.__name__ not in REFERENCE_MODELS:
        return
    if sender._meta.app_label not in ('core', 'locations', 'catalog'):
        return
    try:
        # Invalidate AFTER commit so the cache is not repopulated with stale rows
        transaction.on_commit(invalidate_reference_cache)
    except Exception as e:
        logger.warning(f"Error in invalidate_reference_options signal: {e}")


@receiver([post_save, post_delete])
def invalidate_dashboard(sender, instance, **kwargs):
    """Invalidate dashboard stats when vehicles, invoices or balance requests change"""
    if is_suspended() or sender.__name__ not in DASHBOARD_MODELS:
        return
    if sender._meta.app_label not in ('core', 'catalog', 'vehicles', 'invoices', 'balances'):
        return
    try:
        transaction.on_commit(invalidate_dashboard_cache)
    except Exception as e:
        logger.warning(f"Error in invalidate_dashboard signal: {e}")
