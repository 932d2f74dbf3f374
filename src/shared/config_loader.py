"""Завантаження YAML конфігурації монітора."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "monitor.yaml"

# Sections every consumer may rely on (possibly empty).
_SECTIONS = ("monitor", "sampler", "classifier", "detection", "caller", "languages", "demo_alerts")


class ConfigError(ValueError):
    """Raised when a config section has values the monitor cannot use."""


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Зчитує YAML файл та повертає його вміст як dict.

    Args:
        path: Шлях до файлу.

    Returns:
        Вміст файлу як словник.

    Raises:
        FileNotFoundError: Якщо файл не знайдено.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    with p.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    log.debug("Loaded config %s (%d top-level keys)", p.name, len(data or {}))
    return data or {}


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> dict[str, Any]:
    """Load ``monitor.yaml`` and make sure every known section is present.

    Missing sections become empty dicts (``languages`` and ``demo_alerts``
    become empty lists) so callers can use ``cfg["sampler"].get(...)``.
    """
    cfg = load_yaml(path)
    if not isinstance(cfg, dict):
        raise ConfigError(f"Top level of {path} must be a mapping")
    for section in _SECTIONS:
        default: Any = [] if section in ("languages", "demo_alerts") else {}
        value = cfg.get(section)
        if value is None:
            cfg[section] = default
        elif not isinstance(value, type(default)):
            raise ConfigError(
                f"Section '{section}' must be a {type(default).__name__}, "
                f"got {type(value).__name__}"
            )
    log.info("Loaded monitor config from %s", path)
    return cfg
