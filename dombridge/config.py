"""Configuration loading for dombridge (.dombridge.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import BUILD_MODES, DEFAULT_HOST_MODULE, MODE_DEVELOPMENT

CONFIG_FILENAME = ".dombridge.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class BundlerConfig:
    """Base bundler options inherited by every DOM component bundle URL."""

    mode: str = MODE_DEVELOPMENT
    engine: Optional[str] = None
    minify: bool = False
    environment: Optional[str] = None
    base_url: Optional[str] = None


@dataclass
class ServerConfig:
    """Bind address for ``dombridge serve``."""

    host: str = "127.0.0.1"
    port: int = 8081


@dataclass
class DomBridgeConfig:
    """Represents the settings defined in .dombridge.yml."""

    project_root: Path
    server_root: Optional[Path] = None
    cache_dir: Optional[Path] = None
    dev_server_url: str = "http://localhost:8081"
    settle_delay: float = 1.0
    host_module: str = DEFAULT_HOST_MODULE
    log_file: Optional[Path] = None
    bundler: BundlerConfig = field(default_factory=BundlerConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    def __post_init__(self) -> None:
        if self.server_root is None:
            self.server_root = self.project_root
        if self.cache_dir is None:
            self.cache_dir = self.project_root / ".expo"

    @property
    def dom_entry_dir(self) -> Path:
        """Directory that holds the generated virtual entry modules."""
        return (self.cache_dir or self.project_root / ".expo") / "@dom"


def load_config(config_path: Path) -> DomBridgeConfig:
    """Load configuration from disk, returning defaults when the file is missing."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DomBridgeConfig(project_root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    project_root = _as_path(data.get("project_root"), root) or root

    bundler = BundlerConfig()
    bundler_data = _as_dict(data.get("bundler"))
    if bundler_data:
        mode = _as_str(bundler_data.get("mode")) or MODE_DEVELOPMENT
        if mode not in BUILD_MODES:
            raise ConfigError(f"Unsupported bundler mode: {mode}")
        bundler = BundlerConfig(
            mode=mode,
            engine=_as_str(bundler_data.get("engine")),
            minify=_as_bool(bundler_data.get("minify")) or False,
            environment=_as_str(bundler_data.get("environment")),
            base_url=_as_str(bundler_data.get("base_url")),
        )

    server = ServerConfig()
    server_data = _as_dict(data.get("server"))
    if server_data:
        server = ServerConfig(
            host=_as_str(server_data.get("host")) or server.host,
            port=_as_int(server_data.get("port")) or server.port,
        )

    settle_delay = _as_float(data.get("settle_delay"))
    if settle_delay is not None and settle_delay < 0:
        raise ConfigError("settle_delay must not be negative")

    return DomBridgeConfig(
        project_root=project_root,
        server_root=_as_path(data.get("server_root"), root),
        cache_dir=_as_path(data.get("cache_dir"), project_root),
        dev_server_url=_as_str(data.get("dev_server_url")) or "http://localhost:8081",
        settle_delay=1.0 if settle_delay is None else settle_delay,
        host_module=_as_str(data.get("host_module")) or DEFAULT_HOST_MODULE,
        log_file=_as_path(data.get("log_file"), root),
        bundler=bundler,
        server=server,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return str(value)


def _as_path(value: Any, base: Path) -> Optional[Path]:
    text = _as_str(value)
    if text is None:
        return None
    candidate = Path(text).expanduser()
    if not candidate.is_absolute():
        candidate = base / candidate
    return candidate.resolve()


def _as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Expected a number, received: {value!r}") from exc


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Expected an integer, received: {value!r}") from exc


def _as_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    raise ConfigError(f"Expected a boolean, received: {value!r}")


__all__ = [
    "BundlerConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "DomBridgeConfig",
    "ServerConfig",
    "load_config",
]
