from dataclasses import dataclass
import os

ENV_PREFIX = "SEMLOG_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env(key: str) -> str | None:
    """``SEMLOG_<key>`` stripped, or ``None`` when unset or blank."""
    value = os.getenv(ENV_PREFIX + key, "").strip()
    return value or None


def _env_bool(key: str, default: bool) -> bool:
    value = _env(key)
    if value is None:
        return default
    if value.lower() in _TRUE_VALUES:
        return True
    if value.lower() in _FALSE_VALUES:
        return False
    raise ValueError(f"{ENV_PREFIX}{key} must be one of {sorted(_TRUE_VALUES | _FALSE_VALUES)}, got {value!r}")


def _env_str(key: str, default: str) -> str:
    value = _env(key)
    return default if value is None else value


@dataclass(frozen=True)
class Settings:
    default_logger_name: str = _env_str("DEFAULT_LOGGER", "semlog")
    log_level: str = _env_str("LEVEL", "info")
    log_format: str = _env_str("FORMAT", "json")
    log_redact_fields: str = _env_str("REDACT_FIELDS", "")
    strict_placeholders: bool = _env_bool("STRICT_PLACEHOLDERS", False)
    log_requests: bool = _env_bool("LOG_REQUESTS", True)
    log_request_skip_paths: str = _env_str("REQUEST_SKIP_PATHS", "/healthz")


settings = Settings()
