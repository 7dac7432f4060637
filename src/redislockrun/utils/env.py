"""Environment helper utilities."""

from __future__ import annotations

import os
from typing import Dict, Mapping, Optional


ENV_PREFIX = "REDISLOCKRUN_"

# environment variable -> settings field
ENV_FIELDS: Dict[str, str] = {
    f"{ENV_PREFIX}KEY": "key",
    f"{ENV_PREFIX}ADDR": "redis_addr",
    f"{ENV_PREFIX}PASSWORD": "redis_password",
    f"{ENV_PREFIX}DB": "redis_db",
    f"{ENV_PREFIX}TIMEOUT": "lock_timeout",
    "REDIS_URL": "redis_url",
}


def get_str_env(name: str, *, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the stripped value of ``name``, or None when unset or blank."""
    source = os.environ if environ is None else environ
    raw = source.get(name)
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Collect the settings overrides present in the environment."""
    values: Dict[str, str] = {}
    for env_name, field_name in ENV_FIELDS.items():
        value = get_str_env(env_name, environ=environ)
        if value is not None:
            values[field_name] = value
    return values
