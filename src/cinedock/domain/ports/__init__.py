from .catalog_files import CatalogFileKind, CatalogFilesPort
from .catalog_repository import CatalogRepositoryPort
from .kv_store import KeyValueStorePort
from .session import SessionVerifierPort

__all__ = [
    "CatalogFileKind",
    "CatalogFilesPort",
    "CatalogRepositoryPort",
    "KeyValueStorePort",
    "SessionVerifierPort",
]
