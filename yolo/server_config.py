"""Server settings read from configuration files and the environment."""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from yolo.server_env import ServerEnv

_ENV_PREFIX = "server__"
_ENV_SEPARATOR = "__"


class ConfigError(Exception):
    """The configuration is missing, unreadable or invalid."""


def _load_toml(text: str) -> Any:
    return tomllib.loads(text)


def _load_json(text: str) -> Any:
    return json.loads(text)


def _load_yaml(text: str) -> Any:
    return yaml.safe_load(text)


_LOADERS: tuple[tuple[str, Callable[[str], Any]], ...] = (
    (".toml", _load_toml),
    (".json", _load_json),
    (".yaml", _load_yaml),
    (".yml", _load_yaml),
)


def _load_file(stem: Path) -> dict[str, Any]:
    """Load the first file named `stem` plus a supported extension."""
    for suffix, loader in _LOADERS:
        path = stem.with_name(stem.name + suffix)
        if not path.is_file():
            continue
        try:
            data = loader(path.read_text(encoding="utf-8"))
        except (ValueError, yaml.YAMLError) as exc:
            raise ConfigError(f"failed to parse {path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path} does not hold a table of settings")
        return data
    raise ConfigError(f'configuration file "{stem}" not found')


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for key, value in environ.items():
        if not key.lower().startswith(_ENV_PREFIX):
            continue
        parts = key[len(_ENV_PREFIX):].lower().split(_ENV_SEPARATOR)
        if not all(parts):
            continue
        target = overrides
        for part in parts[:-1]:
            nested = target.get(part)
            if not isinstance(nested, dict):
                nested = target[part] = {}
            target = nested
        target[parts[-1]] = value
    return overrides


def _merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = _merge(current, value)
        else:
            merged[key] = value
    return merged


def _string_field(data: Mapping[str, Any], name: str) -> str:
    if name not in data:
        raise ConfigError(f"missing field `{name}`")
    value = data[name]
    if isinstance(value, (dict, list)) or value is None:
        raise ConfigError(f"field `{name}` must be a string")
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _port_field(data: Mapping[str, Any]) -> int:
    if "port" not in data:
        raise ConfigError("missing field `port`")
    value = data["port"]
    if isinstance(value, bool):
        raise ConfigError("field `port` must be a number")
    if isinstance(value, int):
        port = value
    elif isinstance(value, str):
        try:
            port = int(value.strip())
        except ValueError:
            raise ConfigError(f"field `port` is not a number: {value!r}") from None
    else:
        raise ConfigError("field `port` must be a number")
    if not 0 <= port <= 0xFFFF:
        raise ConfigError(f"port {port} is out of range")
    return port


@dataclass(frozen=True)
class ServerConfig:
    """Where the server listens and the URL it is reached at."""

    host: str
    port: int
    base_url: str

    @classmethod
    def read(
        cls,
        base_path: str | os.PathLike[str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> ServerConfig:
        """Read `config/base`, then `config/<env>`, then SERVER__* variables.

        The environment is chosen by SERVER_ENV and defaults to local. Raises
        ConfigError when a file is missing or a setting is invalid, and
        ValueError when SERVER_ENV names an unknown environment.
        """
        root = Path.cwd() if base_path is None else Path(base_path)
        env_vars = os.environ if environ is None else environ

        config_dir = root / "config"
        server_env = ServerEnv.parse(env_vars.get("SERVER_ENV", ServerEnv.LOCAL.value))

        settings = _load_file(config_dir / "base")
        settings = _merge(settings, _load_file(config_dir / server_env.value))
        settings = _merge(settings, _env_overrides(env_vars))

        return cls(
            host=_string_field(settings, "host"),
            port=_port_field(settings),
            base_url=_string_field(settings, "base_url"),
        )