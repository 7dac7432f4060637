"""Settings loader: defaults, optional YAML file, environment, then flags."""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from redislockrun.core.errors import ConfigurationError
from redislockrun.utils.durations import format_duration, parse_duration
from redislockrun.utils.env import settings_from_env


DEFAULT_REDIS_PORT = 6379


class LockRunSettings(BaseModel):
    key: str = Field(default="lock", min_length=1)
    redis_addr: str = "localhost:6379"
    redis_password: Optional[str] = None
    redis_db: int = Field(default=0, ge=0)
    redis_url: Optional[str] = None  # overrides addr/password/db
    # How long the lock stays valid once taken. The child is never killed when
    # it outlives this window; another host may then take the lock.
    lock_timeout: dt.timedelta = Field(default=dt.timedelta(minutes=30))

    @field_validator("lock_timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip().upper().startswith("P"):
            return parse_duration(value)
        return value

    @field_validator("lock_timeout")
    @classmethod
    def _positive_timeout(cls, value: dt.timedelta) -> dt.timedelta:
        if value <= dt.timedelta(0):
            raise ValueError("lock timeout must be positive")
        return value

    def address(self) -> Tuple[str, int]:
        host, sep, port = self.redis_addr.rpartition(":")
        if not sep:
            return self.redis_addr or "localhost", DEFAULT_REDIS_PORT
        try:
            return host.strip("[]") or "localhost", int(port)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid redis address {self.redis_addr!r}") from exc

    def redacted(self) -> Dict[str, Any]:
        data = self.model_dump()
        if data.get("redis_password"):
            data["redis_password"] = "***"
        if self.redis_url and "@" in self.redis_url:
            scheme, _, rest = self.redis_url.partition("://")
            data["redis_url"] = f"{scheme}://***@{rest.rpartition('@')[2]}"
        data["lock_timeout"] = format_duration(self.lock_timeout)
        return data

    @classmethod
    def from_file(cls, path: Path) -> "LockRunSettings":
        return cls.load(config_path=path, environ={})

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> "LockRunSettings":
        data: Dict[str, Any] = {}
        if config_path is not None:
            data.update(_read_yaml(config_path))
        data.update(settings_from_env(environ))
        data.update({name: value for name, value in (overrides or {}).items() if value is not None})
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid settings: {exc}") from exc


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data
