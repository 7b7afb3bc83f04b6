import os
import logging.config
from dataclasses import dataclass

CATALOG_SOURCES = ("static", "webhook", "database")

# Values people leave in .env files before wiring the spreadsheet script
PLACEHOLDER_URLS = {"", "YOUR_WEBHOOK_URL", "PASTE_YOUR_WEBHOOK_URL_HERE", "changeme"}


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _api_prefix(raw: str) -> str:
    prefix = raw.strip()
    if prefix and not prefix.startswith("/"):
        prefix = "/" + prefix
    return prefix.rstrip("/")


@dataclass(frozen=True)
class Settings:
    webhook_url: str = ""
    admin_secret: str = ""
    catalog_source: str = "static"
    webhook_timeout: float = 10.0
    shipping_fee: int = 0
    strict_cart: bool = False
    api_prefix: str = ""
    log_level: str = "INFO"
    database_url: str = "sqlite:///storefront.db"
    db_schema: str = ""

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.
        DATABASE_URL wins over the individual DB_* variables.
        """
        db_schema = os.getenv("DB_SCHEMA", "storefront")
        database_url = os.getenv("DATABASE_URL", "").strip()
        if not database_url:
            user = os.getenv("DB_USER", "app")
            password = os.getenv("DB_PASS", "app")
            name = os.getenv("DB_NAME", "appdb")
            host = os.getenv("DB_HOST", "localhost")
            port = os.getenv("DB_PORT", "5432")
            # psycopg3; search_path so unqualified tables use our schema
            options = f"-csearch_path={db_schema},public"
            database_url = (
                f"postgresql+psycopg://{user}:{password}@{host}:{port}/{name}"
                f"?options={options}"
            )

        catalog_source = os.getenv("CATALOG_SOURCE", "static").strip().lower()
        if catalog_source not in CATALOG_SOURCES:
            raise ValueError(f"CATALOG_SOURCE must be one of {CATALOG_SOURCES}, got {catalog_source!r}")

        return cls(
            webhook_url=os.getenv("WEBHOOK_URL", "").strip(),
            admin_secret=os.getenv("ADMIN_SECRET", ""),
            catalog_source=catalog_source,
            webhook_timeout=float(os.getenv("WEBHOOK_TIMEOUT", "10")),
            shipping_fee=int(os.getenv("SHIPPING_FEE", "0")),
            strict_cart=_env_bool("STRICT_CART"),
            api_prefix=_api_prefix(os.getenv("API_PREFIX", "")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            database_url=database_url,
            db_schema=db_schema,
        )

    @property
    def webhook_configured(self) -> bool:
        url = self.webhook_url.strip()
        if url in PLACEHOLDER_URLS:
            return False
        return url.startswith(("http://", "https://"))


def configure_logging(settings: Settings) -> None:
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "verbose": {
                "format": "{levelname} {asctime} {module} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "verbose",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": "WARNING",
        },
        "loggers": {
            "storefront": {
                "handlers": ["console"],
                "level": settings.log_level,
                "propagate": False,
            },
        },
    })
