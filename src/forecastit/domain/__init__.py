"""Domain layer for forecastit application."""

# Services are imported lazily so that forecastit.database can import
# forecastit.domain.entities without pulling the services back in.
_SERVICES = {
    "AccountService": "forecastit.domain.account",
    "CategoryService": "forecastit.domain.category",
    "LedgerService": "forecastit.domain.ledger",
    "ProjectionService": "forecastit.domain.projection",
    "RecurringRuleService": "forecastit.domain.rule",
    "TransactionService": "forecastit.domain.transaction",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
