"""Runtime configuration helpers for flowaudit."""

from __future__ import annotations
from functools import lru_cache
from dynaconf import Dynaconf


_DEFAULTS: dict[str, object] = {
    "DAYS_ABANDONED_WORKFLOW": 90,
    "AUDIT_TIMEOUT_SECONDS": 60,
    "PUBLIC_API_ENABLED": True,
    "EXECUTIONS_DATA_PRUNE": True,
    "BLOCK_FILE_ACCESS_TO_INTERNAL_PATHS": True,
    "EXCLUDED_NODE_TYPES": [],
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _build_loader() -> Dynaconf:
    """Create a Dynaconf loader wired to environment variables only."""
    return Dynaconf(
        envvar_prefix="FLOWAUDIT",
        settings_files=[],  # No config files, env vars only
        load_dotenv=True,
        environments=False,
    )


def _coerce_bool(key: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    candidate = str(value).strip().lower()
    if candidate in _TRUE_VALUES:
        return True
    if candidate in _FALSE_VALUES:
        return False
    msg = f"FLOWAUDIT_{key} must be a boolean."
    raise ValueError(msg)


def _coerce_node_types(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, list | tuple | set | frozenset):
        items = [str(item) for item in value]
    else:
        msg = "FLOWAUDIT_EXCLUDED_NODE_TYPES must be a list or comma separated string."
        raise ValueError(msg)
    return [item.strip() for item in items if item.strip()]


def _normalize_settings(source: Dynaconf) -> Dynaconf:
    """Validate and fill defaults on the raw Dynaconf settings."""
    normalized = Dynaconf(
        envvar_prefix="FLOWAUDIT",
        settings_files=[],
        load_dotenv=False,
        environments=False,
    )

    days_raw = source.get(
        "DAYS_ABANDONED_WORKFLOW", _DEFAULTS["DAYS_ABANDONED_WORKFLOW"]
    )
    try:
        days = int(days_raw)
    except (TypeError, ValueError) as exc:
        msg = "FLOWAUDIT_DAYS_ABANDONED_WORKFLOW must be an integer."
        raise ValueError(msg) from exc
    if days <= 0:
        msg = "FLOWAUDIT_DAYS_ABANDONED_WORKFLOW must be greater than zero."
        raise ValueError(msg)
    normalized.set("DAYS_ABANDONED_WORKFLOW", days)

    timeout_raw = source.get(
        "AUDIT_TIMEOUT_SECONDS", _DEFAULTS["AUDIT_TIMEOUT_SECONDS"]
    )
    if timeout_raw is None:
        timeout = 0.0
    else:
        try:
            timeout = float(timeout_raw)
        except (TypeError, ValueError) as exc:
            msg = "FLOWAUDIT_AUDIT_TIMEOUT_SECONDS must be a number."
            raise ValueError(msg) from exc
    if timeout < 0:
        msg = "FLOWAUDIT_AUDIT_TIMEOUT_SECONDS must not be negative."
        raise ValueError(msg)
    normalized.set("AUDIT_TIMEOUT_SECONDS", timeout)

    for key in (
        "PUBLIC_API_ENABLED",
        "EXECUTIONS_DATA_PRUNE",
        "BLOCK_FILE_ACCESS_TO_INTERNAL_PATHS",
    ):
        normalized.set(key, _coerce_bool(key, source.get(key, _DEFAULTS[key])))

    normalized.set(
        "EXCLUDED_NODE_TYPES",
        _coerce_node_types(
            source.get("EXCLUDED_NODE_TYPES", _DEFAULTS["EXCLUDED_NODE_TYPES"])
        ),
    )
    return normalized


@lru_cache(maxsize=1)
def _load_settings() -> Dynaconf:
    """Load settings once and cache the normalized Dynaconf instance."""
    return _normalize_settings(_build_loader())


def get_settings(*, refresh: bool = False) -> Dynaconf:
    """Return the cached Dynaconf settings, reloading them if requested."""
    if refresh:
        _load_settings.cache_clear()
    return _load_settings()


__all__ = ["get_settings"]
