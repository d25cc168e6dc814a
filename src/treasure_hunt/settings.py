from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml
from platformdirs import user_config_dir

from .errors import SettingsError

logger = logging.getLogger(__name__)

APP_NAME = "treasure-hunt"
USER_SETTINGS_FILE = "settings.yaml"

SECTIONS = ("paths", "logging")

# Environment overrides: env var -> (section, key)
ENV_OVERRIDES = {
    "TREASURE_HUNT_INPUT": ("paths", "input"),
    "TREASURE_HUNT_OUTPUT": ("paths", "output"),
    "TREASURE_HUNT_LOG_LEVEL": ("logging", "level"),
}


@dataclass
class PathSettings:
    input: str = "initialMap.txt"
    output: str = "map.txt"


@dataclass
class LoggingSettings:
    level: str = "INFO"


@dataclass
class Settings:
    """Runtime settings for the command line entry point.

    Sources, lowest to highest precedence: packaged defaults
    (``treasure_hunt/config/default_settings.yaml``), a user YAML file,
    then ``TREASURE_HUNT_*`` environment variables. Command line flags are
    applied on top by the CLI.
    """

    paths: PathSettings = field(default_factory=PathSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise SettingsError(f"Invalid YAML in settings file {path}: {exc}") from exc
        except OSError as exc:
            raise SettingsError(f"Cannot read settings file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {path} must hold a mapping, got {type(data).__name__}")
        return data

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def _from_dict(cls, data: dict) -> "Settings":
        unknown = sorted(str(k) for k in data if k not in SECTIONS)
        if unknown:
            raise SettingsError(f"Unknown settings section(s): {', '.join(unknown)}")
        return Settings(
            paths=cls._section(data, "paths", PathSettings),
            logging=cls._section(data, "logging", LoggingSettings),
        )

    @staticmethod
    def _section(data: dict, name: str, section_cls):
        raw = data.get(name) or {}
        if not isinstance(raw, dict):
            raise SettingsError(f"Settings section {name!r} must be a mapping, got {type(raw).__name__}")
        allowed = {f.name for f in dataclasses.fields(section_cls)}
        unknown = sorted(str(k) for k in raw if k not in allowed)
        if unknown:
            raise SettingsError(f"Unknown key(s) in settings section {name!r}: {', '.join(unknown)}")
        return section_cls(**{k: str(v) for k, v in raw.items()})

    @staticmethod
    def default_user_path() -> Path:
        return Path(user_config_dir(APP_NAME)) / USER_SETTINGS_FILE

    @staticmethod
    def _env_overrides(env: Mapping[str, str]) -> dict:
        out: Dict[str, dict] = {}
        for env_key, (section, key) in ENV_OVERRIDES.items():
            value = env.get(env_key)
            if value:
                out.setdefault(section, {})[key] = value
        return out

    @classmethod
    def load(cls, user_path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Load settings from built-in defaults, a user file and the environment.

        If user_path is None the platform user config file is used when it
        exists. An explicit user_path that does not exist is reported and
        skipped.

        Raises:
            SettingsError: if a user file is unreadable, is not valid YAML, or
                holds unknown sections, keys or non-mapping sections.
        """
        try:
            default_data = yaml.safe_load(
                resources.files("treasure_hunt.config").joinpath("default_settings.yaml").read_text(encoding="utf-8")
            ) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            default_data = dataclasses.asdict(Settings())

        user_data: dict = {}
        if user_path is not None:
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user settings from %s", user_path)
            else:
                logger.warning("User settings file not found: %s", user_path)
        else:
            discovered = cls.default_user_path()
            if discovered.exists():
                user_data = cls._load_yaml(discovered)
                logger.info("Loaded user settings from %s", discovered)

        merged = cls._deep_merge(default_data, user_data)
        merged = cls._deep_merge(merged, cls._env_overrides(os.environ if env is None else env))
        settings = cls._from_dict(merged)
        logger.debug("Settings merged: %s", settings)
        return settings

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(dataclasses.asdict(self), f, sort_keys=False)
        logger.info("Saved settings to %s", path)


__all__ = ["Settings", "PathSettings", "LoggingSettings"]
