"""Settings for buses, layered from defaults, a TOML file and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import tomllib
from platformdirs import user_config_dir

from .engine import DEFAULT_ID_PREFIX

DEFAULT_APP_NAME = "psp"
CONFIG_FILE_NAME = "config.toml"
GLOBAL_NAMESPACE = "GLOBAL"

CONFIG_PATH_ENV = "PSP_CONFIG"
_ENV_KEY_MAP: dict[str, str] = {
    "global_namespace": "PSP_GLOBAL_NAMESPACE",
    "id_prefix": "PSP_ID_PREFIX",
    "debug": "PSP_DEBUG",
}
_TRUTHY = {"1", "true", "yes", "on"}


def default_config_path() -> Path:
    """Return the platform-specific default config path."""

    base_dir = Path(user_config_dir(DEFAULT_APP_NAME, appauthor=False))
    return base_dir / CONFIG_FILE_NAME


def _load_config_from_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    # settings may live at top level or under [psp]
    section = data.get("psp")
    return dict(section) if isinstance(section, dict) else data


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class BusSettings:
    global_namespace: str = GLOBAL_NAMESPACE
    id_prefix: str = DEFAULT_ID_PREFIX
    debug: bool = False

    def merged(self, values: Mapping[str, Any]) -> "BusSettings":
        """Return a copy with the recognised keys of ``values`` applied."""
        updates: dict[str, Any] = {}
        if "global_namespace" in values:
            updates["global_namespace"] = str(values["global_namespace"])
        if "id_prefix" in values:
            updates["id_prefix"] = str(values["id_prefix"])
        if "debug" in values:
            updates["debug"] = _as_bool(values["debug"])
        return replace(self, **updates)


def load_settings(path: Path | str | None = None, env: Mapping[str, str] | None = None) -> BusSettings:
    """Resolve settings: defaults, then the config file, then environment overrides."""
    env = os.environ if env is None else env
    if path is None:
        override = env.get(CONFIG_PATH_ENV)
        path = Path(override).expanduser() if override else default_config_path()
    settings = BusSettings().merged(_load_config_from_file(Path(path)))

    env_values = {key: env[name] for key, name in _ENV_KEY_MAP.items() if env.get(name)}
    return settings.merged(env_values)
