"""Loader for ``key = value`` configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from .logging_utils import get_module_logger

logger = get_module_logger("ConfigLoader")

_TRUE_WORDS = ("true", "yes", "on", "1")
_BOOL_WORDS = _TRUE_WORDS + ("false", "no", "off", "0")


class ConfigLoader:
    """Reads flat text config files.

    One ``key = value`` pair per line; blank lines and ``#`` comments are
    ignored, and a trailing ``# comment`` after a value is stripped. When a
    defaults mapping is supplied, values are coerced to the type of the
    matching default.
    """

    @staticmethod
    def load(
        config_path: Path,
        defaults: Optional[Dict[str, Any]] = None,
        strict: bool = False,
    ) -> Dict[str, Any]:
        config = dict(defaults) if defaults else {}
        config_path = Path(config_path)

        if not config_path.exists():
            logger.debug("Config file not found at %s, using defaults", config_path)
            return config

        try:
            text = config_path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to read config file %s: %s", config_path, exc)
            return config

        for line_num, raw in enumerate(text.splitlines(), 1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                logger.warning("Invalid config line %d (missing '='): %s", line_num, line)
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.split("#", 1)[0].strip()

            if strict and defaults is not None and key not in defaults:
                logger.warning("Unknown config key '%s' (line %d) ignored", key, line_num)
                continue

            if defaults and key in defaults and defaults[key] is not None:
                config[key] = ConfigLoader._parse_value_with_type(
                    value, type(defaults[key]), defaults[key]
                )
            else:
                config[key] = ConfigLoader._parse_value(value)

        logger.info("Loaded config from %s (%d values)", config_path, len(config))
        return config

    @staticmethod
    def _parse_value(value: str) -> Any:
        if value.lower() in _BOOL_WORDS:
            return value.lower() in _TRUE_WORDS
        for cast in (int, float):
            try:
                return cast(value)
            except ValueError:
                pass
        return value

    @staticmethod
    def _parse_value_with_type(value: str, target_type: type, default: Any) -> Any:
        if target_type is bool:
            return value.lower() in _TRUE_WORDS

        if target_type in (int, float):
            try:
                return target_type(value)
            except ValueError:
                logger.warning("Failed to parse '%s' as %s, using default", value, target_type.__name__)
                return default

        return value


__all__ = ["ConfigLoader"]
