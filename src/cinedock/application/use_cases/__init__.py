from .catalog_listing import CatalogListingUseCase
from .resolve_stream import StreamResolveUseCase

__all__ = ["CatalogListingUseCase", "StreamResolveUseCase"]
