"""Configuration for the events service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any


DEFAULT_SERVER_URL = "https://eidolon.com/events"
DEFAULT_CACHE_KEY = "EVENTS_CACHE"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _env_timeout() -> float | None:
    raw = os.environ.get("EVENTS_TIMEOUT", "30")
    if raw.lower() in ("", "none", "0"):
        return None
    return float(raw)


@dataclass
class TransportConfig:
    """Where and how batches are delivered."""
    type: str = "http"  # http | console

    # Collector endpoint
    server_url: str = field(
        default_factory=lambda: os.environ.get("EVENTS_SERVER_URL", DEFAULT_SERVER_URL)
    )

    # Request timeout (seconds, None = no timeout)
    timeout_seconds: float | None = field(default_factory=_env_timeout)

    # Extra arguments for the console transport
    console: dict[str, Any] = field(default_factory=dict)


@dataclass
class FlushConfig:
    """Batching and retry timing."""
    # Delay before each flush attempt (also the retry interval)
    cooldown_seconds: float = field(
        default_factory=lambda: float(os.environ.get("EVENTS_COOLDOWN_SECONDS", "2.0"))
    )

    # Start a flush cycle right after recovering persisted events
    flush_on_start: bool = False


@dataclass
class StorageConfig:
    """Persistence of unsent events."""
    type: str = "file"  # file | memory | redis

    # Key holding the serialized queue
    key: str = DEFAULT_CACHE_KEY

    # File store
    path: str = field(
        default_factory=lambda: os.environ.get("EVENTS_CACHE_PATH", "events_cache.json")
    )

    # Redis store
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str | None = None
    redis_prefix: str = "events:"


@dataclass
class LoggingConfig:
    """Diagnostic logging."""
    # Emit [Events] diagnostics (track/flush markers). Off in production.
    debug: bool = field(default_factory=lambda: _env_bool("EVENTS_DEBUG"))

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Config:
    """Main configuration container."""
    transport: TransportConfig = field(default_factory=TransportConfig)
    flush: FlushConfig = field(default_factory=FlushConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        """Create config from dictionary."""
        return cls(
            transport=TransportConfig(**data.get("transport", {})),
            flush=FlushConfig(**data.get("flush", {})),
            storage=StorageConfig(**data.get("storage", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    @classmethod
    def from_yaml(cls, path: str) -> Config:
        """Load config from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> Config:
        """Load config from JSON file."""
        import json
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str) -> Config:
        """Load config, picking the parser from the file extension."""
        if path.endswith((".yaml", ".yml")):
            return cls.from_yaml(path)
        return cls.from_json(path)
