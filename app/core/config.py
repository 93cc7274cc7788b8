from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

_TRUTHY = ("1", "true", "yes", "on")


def _getenv(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


def _getenv_optional(name: str) -> str | None:
    # Unset, empty and the `.env.example` placeholders all mean "not configured".
    value = _getenv(name, "")
    if not value or (value.startswith("your_") and value.endswith("_here")):
        return None
    return value


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    database_url: str | None
    redis_url: str | None
    pinata_api_key: str | None = None
    pinata_secret_api_key: str | None = None
    pinata_base_url: str = "https://api.pinata.cloud"
    ipfs_gateway_url: str = "https://gateway.pinata.cloud/ipfs"
    solana_rpc_url: str = "http://localhost:8899"
    solana_network: str = "devnet"
    cors_origins: tuple[str, ...] = field(default=("http://localhost:3000",))

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"

    @property
    def pinata_configured(self) -> bool:
        return bool(self.pinata_api_key and self.pinata_secret_api_key)


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    port_raw = _getenv("PORT", "8000")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    cors_origins = tuple(
        origin.strip()
        for origin in _getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    )

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=_getenv("LOG_JSON", "false").lower() in _TRUTHY,
        port=port,
        database_url=_getenv_optional("DATABASE_URL"),
        redis_url=_getenv_optional("REDIS_URL"),
        pinata_api_key=_getenv_optional("PINATA_API_KEY"),
        pinata_secret_api_key=_getenv_optional("PINATA_SECRET_API_KEY"),
        pinata_base_url=_getenv("PINATA_BASE_URL", "https://api.pinata.cloud").rstrip(
            "/"
        ),
        ipfs_gateway_url=_getenv(
            "IPFS_GATEWAY_URL", "https://gateway.pinata.cloud/ipfs"
        ).rstrip("/"),
        solana_rpc_url=_getenv("SOLANA_RPC_URL", "http://localhost:8899"),
        solana_network=_getenv("SOLANA_NETWORK", "devnet").lower(),
        cors_origins=cors_origins,
    )


SETTINGS = load_settings()
