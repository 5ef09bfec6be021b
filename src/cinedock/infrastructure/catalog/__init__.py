"""Catalog infrastructure - identifiers, parsers and the dual-source store."""

from .files import FlatFileCatalog
from .store import CatalogStore

__all__ = ["CatalogStore", "FlatFileCatalog"]
