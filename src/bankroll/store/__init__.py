"""Ledger persistence: JSON blob store and export documents."""

from .persistence import LedgerStore, export_document, parse_document

__all__ = ["LedgerStore", "export_document", "parse_document"]
