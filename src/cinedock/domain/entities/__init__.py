from .catalog import (
    BunnyEmbedToken,
    Catalog,
    Episode,
    Movie,
    ProxiedResource,
    Provenance,
    Series,
    StreamDescriptor,
    StreamKind,
    Subtitle,
)
from .errors import (
    CatalogError,
    InvalidRequest,
    NotFound,
    ServiceMisconfigured,
    Unauthorized,
    UpstreamFailure,
)

__all__ = [
    "BunnyEmbedToken",
    "Catalog",
    "CatalogError",
    "Episode",
    "InvalidRequest",
    "Movie",
    "NotFound",
    "ProxiedResource",
    "Provenance",
    "Series",
    "ServiceMisconfigured",
    "StreamDescriptor",
    "StreamKind",
    "Subtitle",
    "Unauthorized",
    "UpstreamFailure",
]
