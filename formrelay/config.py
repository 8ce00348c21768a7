import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from formrelay.errors import ConfigError

load_dotenv()

DEFAULT_ALLOWED_ORIGINS = [
    "https://ninechat.com.br",
    "https://www.ninechat.com.br",
    "http://localhost:5173",
    "http://localhost:3000",
]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    freshdesk_domain: str = ""
    freshdesk_api_key: str = ""
    port: int = 3000
    allowed_origins: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    rate_limit_window_seconds: int = 60
    rate_limit_max_requests: int = 20
    rate_limit_max_clients: int = 10000
    freshdesk_timeout_seconds: int = 15
    commercial_validation_policy: str = "minimal"
    incident_validation_policy: str = "minimal"
    contact_sync: bool = True
    log_level: str = "INFO"

    def check(self) -> None:
        """Refuses to run without Freshdesk credentials."""
        missing = [
            name
            for name, value in (
                ("FRESHDESK_DOMAIN", self.freshdesk_domain),
                ("FRESHDESK_API_KEY", self.freshdesk_api_key),
            )
            if not value
        ]
        if missing:
            raise ConfigError(f"Set {' and '.join(missing)} in the environment.")


def get_settings() -> Settings:
    return Settings(
        freshdesk_domain=os.environ.get("FRESHDESK_DOMAIN", "").strip(),
        freshdesk_api_key=os.environ.get("FRESHDESK_API_KEY", "").strip(),
        port=_env_int("PORT", 3000),
        allowed_origins=_env_list("CORS_ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS),
        rate_limit_window_seconds=_env_int("RATE_LIMIT_WINDOW_SECONDS", 60),
        rate_limit_max_requests=_env_int("RATE_LIMIT_MAX_REQUESTS", 20),
        rate_limit_max_clients=_env_int("RATE_LIMIT_MAX_CLIENTS", 10000),
        freshdesk_timeout_seconds=_env_int("FRESHDESK_TIMEOUT_SECONDS", 15),
        commercial_validation_policy=os.environ.get("COMMERCIAL_VALIDATION_POLICY", "minimal").strip().lower(),
        incident_validation_policy=os.environ.get("INCIDENT_VALIDATION_POLICY", "minimal").strip().lower(),
        contact_sync=_env_bool("FRESHDESK_CONTACT_SYNC", True),
        log_level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
