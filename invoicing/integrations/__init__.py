from .base import (
    InvoiceDocument,
    SettingsProvider,
    SequenceStore,
    MemberLookup,
    InvoiceStore,
    InvoiceStorage,
    DocumentRenderer,
)

__all__ = [
    "InvoiceDocument",
    "SettingsProvider",
    "SequenceStore",
    "MemberLookup",
    "InvoiceStore",
    "InvoiceStorage",
    "DocumentRenderer",
]
