import logging
from dataclasses import fields
from typing import Dict, Any, Optional

import yaml

from retro_chip8.common.errors import ConfigError
from retro_chip8.common.types import ExtensionMode, StackPolicy
from .models import SystemConfig, DisplayConfig, QuirkOverrides

logger = logging.getLogger(__name__)

_TOP_LEVEL_KEYS = {
    "extension_mode", "instructions_per_tick", "timer_hz", "display", "quirks",
    "stack_policy", "strict_opcodes", "rng_seed", "rom",
}

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        try:
            with open(path, 'r', encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> SystemConfig:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e
        return self._parse_config(data or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping.")
        for key in data:
            if key not in _TOP_LEVEL_KEYS:
                logger.warning("Ignoring unknown config key '%s'", key)

        # Parse Display
        display_data = data.get("display", {}) or {}
        if not isinstance(display_data, dict):
            raise ConfigError("display must be a mapping.")
        display = DisplayConfig(
            width=self._parse_int(display_data.get("width", 64)),
            height=self._parse_int(display_data.get("height", 32)),
            scale_factor=self._parse_int(display_data.get("scale_factor", 20)),
            fg_color=self._parse_int(display_data.get("fg_color", 0xFFFFFFFF)),
            bg_color=self._parse_int(display_data.get("bg_color", 0x00000000)),
        )
        if display.width <= 0 or display.height <= 0:
            raise ConfigError(f"Display size must be positive, got {display.width}x{display.height}.")

        # Parse Quirk overrides
        quirk_data = data.get("quirks", {}) or {}
        if not isinstance(quirk_data, dict):
            raise ConfigError("quirks must be a mapping.")
        quirk_names = {f.name for f in fields(QuirkOverrides)}
        overrides = {}
        for name, value in quirk_data.items():
            if name not in quirk_names:
                raise ConfigError(f"Unknown quirk: {name}")
            overrides[name] = self._parse_bool(value, name)

        instructions_per_tick = self._parse_int(data.get("instructions_per_tick", 10))
        if instructions_per_tick <= 0:
            raise ConfigError("instructions_per_tick must be positive.")
        timer_hz = self._parse_int(data.get("timer_hz", 60))
        if timer_hz <= 0:
            raise ConfigError("timer_hz must be positive.")
        rom_path = data.get("rom")
        if rom_path is not None and not isinstance(rom_path, str):
            raise ConfigError(f"rom must be a file path, got {rom_path!r}")

        return SystemConfig(
            extension_mode=self._parse_enum(ExtensionMode, data.get("extension_mode", "LEGACY"), "extension_mode"),
            instructions_per_tick=instructions_per_tick,
            timer_hz=timer_hz,
            display=display,
            quirks=QuirkOverrides(**overrides),
            stack_policy=self._parse_enum(StackPolicy, data.get("stack_policy", "clamp"), "stack_policy"),
            strict_opcodes=self._parse_bool(data.get("strict_opcodes", False), "strict_opcodes"),
            rng_seed=self._parse_optional_int(data.get("rng_seed")),
            rom_path=rom_path,
        )

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ConfigError(f"Invalid integer format: {value}")

    def _parse_optional_int(self, value: Any) -> Optional[int]:
        return None if value is None else self._parse_int(value)

    def _parse_bool(self, value: Any, name: str) -> Optional[bool]:
        if value is None or isinstance(value, bool):
            return value
        raise ConfigError(f"{name} must be true or false, got {value!r}")

    def _parse_enum(self, enum_type, value: Any, name: str):
        if isinstance(value, enum_type):
            return value
        for member in enum_type:
            if isinstance(value, str) and value.lower() == member.value.lower():
                return member
        choices = ", ".join(m.value for m in enum_type)
        raise ConfigError(f"Invalid {name} '{value}' (expected one of: {choices})")
