"""Domain layer for busledger application."""

from busledger.domain.revenue import build_daily_entry, compute_net_revenue

__all__ = [
    "LedgerStore",
    "AutomationEngine",
    "ObjectiveLifecycle",
    "SummaryService",
    "build_daily_entry",
    "compute_net_revenue",
]

_SERVICES = {
    "LedgerStore": "busledger.domain.ledger",
    "AutomationEngine": "busledger.domain.automation",
    "ObjectiveLifecycle": "busledger.domain.objectives",
    "SummaryService": "busledger.domain.summary",
}


# Import services lazily to avoid circular dependencies with the database layer
def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
