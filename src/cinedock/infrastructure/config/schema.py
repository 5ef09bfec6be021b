"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
StoreBackend = Literal["upstash", "redis"]

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
)


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class CatalogConfig(BaseModel):
    """Flat-file catalog locations and locale labels.

    Labels default to the Arabic catalog the service was built for.
    """

    data_dir: Path = Field(
        default=Path("./data"),
        description="Directory holding the flat catalog files.",
    )
    movies_file: str = Field(default="catalog.txt")
    series_file: str = Field(default="series.txt")
    foreign_file: str = Field(default="foreign-series.txt")

    movie_category: str = Field(
        default="أفلام",
        description="Category used when a movie line has none.",
    )
    series_category: str = Field(default="مسلسل")
    foreign_category: str = Field(default="مسلسل أجنبي")
    episode_title_template: str = Field(
        default="الحلقة {number:02d}",
        description="Display title for episodes with a numeric index.",
    )

    @field_validator("data_dir", mode="before")
    @classmethod
    def _validate_data_dir(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("episode_title_template")
    @classmethod
    def _validate_template(cls, v: str) -> str:
        try:
            v.format(number=1)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                "episode_title_template must only reference {number}"
            ) from e
        return v


class StoreConfig(BaseModel):
    """Mutable key-attribute store (admin-curated catalog entries)."""

    backend: StoreBackend = Field(
        default="upstash",
        description="'upstash' (Redis verbs over HTTP) or 'redis' (native).",
    )
    rest_url: str | None = Field(
        default=None,
        description="REST endpoint base URL (backend=upstash).",
    )
    rest_token: str | None = Field(
        default=None,
        description="Bearer token for the REST endpoint (backend=upstash).",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (backend=redis).",
    )
    max_concurrent: int = Field(
        default=10,
        description="Max parallel store commands (semaphore limit).",
    )

    @property
    def has_credentials(self) -> bool:
        if self.backend == "redis":
            return bool(self.redis_url)
        return bool(self.rest_url and self.rest_token)


class AuthConfig(BaseModel):
    """Viewer session verification."""

    require_session: bool = Field(
        default=True,
        description="Reject catalog/stream/proxy requests without a valid session.",
    )
    cookie_name: str = Field(default="session")
    jwt_secret: str | None = Field(
        default=None,
        description="HMAC secret shared with the session issuer.",
    )
    jwt_algorithms: list[str] = Field(default_factory=lambda: ["HS256"])


class ProxyConfig(BaseModel):
    """Same-origin HLS / subtitle relay."""

    path: str = Field(
        default="/api/v1/hls-proxy",
        description="Path rewritten manifest references point at.",
    )
    cache_max_age: int = Field(
        default=300,
        description="Cache-Control max-age (seconds) for proxied HLS resources.",
    )
    subtitle_cache_max_age: int = Field(default=3600)

    @field_validator("cache_max_age", "subtitle_cache_max_age")
    @classmethod
    def _validate_max_age(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max-age must be >= 0")
        return v


class BunnyConfig(BaseModel):
    """Bunny Stream token authentication for protected embeds."""

    library_id: str | None = Field(
        default=None,
        description="Video library the signed embeds belong to.",
    )
    security_key: str | None = Field(
        default=None,
        description="Token authentication key of the library.",
    )
    token_ttl_seconds: int = Field(
        default=24 * 60 * 60,
        description="Lifetime of a signed embed token.",
    )

    @field_validator("token_ttl_seconds")
    @classmethod
    def _validate_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("token_ttl_seconds must be > 0")
        return v

    @property
    def has_credentials(self) -> bool:
        return bool(self.library_id and self.security_key)


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/catalog/store/auth/proxy/bunny).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="cinedock", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Timeout for every outbound fetch (store, media, subtitles).",
    )
    http_user_agent: str = Field(
        default=BROWSER_USER_AGENT,
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="Browser-like User-Agent for upstream media fetches.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    proxy: ProxyConfig = Field(default_factory=ProxyConfig)
    bunny: BunnyConfig = Field(default_factory=BunnyConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.

        Secrets are masked.
        """
        store = self.store.model_dump()
        if store.get("rest_token"):
            store["rest_token"] = "***"
        auth = self.auth.model_dump()
        if auth.get("jwt_secret"):
            auth["jwt_secret"] = "***"
        bunny = self.bunny.model_dump()
        if bunny.get("security_key"):
            bunny["security_key"] = "***"
        catalog = self.catalog.model_dump()
        catalog["data_dir"] = str(self.catalog.data_dir)
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "catalog": catalog,
            "store": store,
            "auth": auth,
            "proxy": self.proxy.model_dump(),
            "bunny": bunny,
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read CINEDOCK_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - CINEDOCK_HTTP_TIMEOUT_SECONDS
    - CINEDOCK_DATA_DIR
    - CINEDOCK_LOG_LEVEL
    - CINEDOCK_STORE_REST_URL (or UPSTASH_REDIS_REST_URL)
    - CINEDOCK_STORE_REST_TOKEN (or UPSTASH_REDIS_REST_TOKEN)
    - CINEDOCK_JWT_SECRET (or SESSION_JWT_SECRET)
    - CINEDOCK_BUNNY_LIBRARY_ID (or BUNNY_LIBRARY_ID)
    - CINEDOCK_BUNNY_SECURITY_KEY (or BUNNY_SECURITY_KEY)
    """

    model_config = SettingsConfigDict(
        env_prefix="CINEDOCK_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    data_dir: Optional[Path] = None

    store_backend: Optional[StoreBackend] = None
    store_rest_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "CINEDOCK_STORE_REST_URL", "UPSTASH_REDIS_REST_URL"
        ),
    )
    store_rest_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "CINEDOCK_STORE_REST_TOKEN", "UPSTASH_REDIS_REST_TOKEN"
        ),
    )
    store_redis_url: Optional[str] = None

    require_session: Optional[bool] = None
    jwt_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("CINEDOCK_JWT_SECRET", "SESSION_JWT_SECRET"),
    )

    bunny_library_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "CINEDOCK_BUNNY_LIBRARY_ID", "BUNNY_LIBRARY_ID"
        ),
    )
    bunny_security_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "CINEDOCK_BUNNY_SECURITY_KEY", "BUNNY_SECURITY_KEY"
        ),
    )

    @field_validator("data_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
