"""Domain layer for cnabledger.

Services are imported lazily so that low-level modules (entities, enums,
errors) can be used from ``cnabledger.utils`` and ``cnabledger.database``
without pulling in the whole service graph.
"""

_SERVICES = {
    "CNABFileParser": "cnabledger.domain.cnab_file",
    "StoreResolver": "cnabledger.domain.store_grouping",
    "LedgerReconciler": "cnabledger.domain.reconciliation",
    "FileProcessingService": "cnabledger.domain.file_processing",
    "FileUploadService": "cnabledger.domain.file_upload",
    "FileService": "cnabledger.domain.file_service",
    "StoreService": "cnabledger.domain.store",
    "TransactionService": "cnabledger.domain.transaction",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        module = importlib.import_module(_SERVICES[name])
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
