import logging
import yaml
from typing import Dict, Any, Optional
from .models import MachineConfig, ColorConfig, DEFAULT_KEY_MAP

logger = logging.getLogger(__name__)

class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> MachineConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ValueError("Machine config must be a mapping.")
        defaults = MachineConfig()

        ips = self._parse_positive(data, "instructions_per_second", defaults.instructions_per_second)
        timer_hz = self._parse_positive(data, "timer_hz", defaults.timer_hz)
        scale = self._parse_positive(data, "scale", defaults.scale)

        font = data.get("font", defaults.font)
        if not isinstance(font, bool):
            raise ValueError(f"Invalid value for 'font': {font!r}")

        rng_seed: Optional[int] = None
        if data.get("rng_seed") is not None:
            rng_seed = self._parse_int(data["rng_seed"], "rng_seed")

        # Parse Key Map
        key_map = dict(DEFAULT_KEY_MAP)
        if "key_map" in data:
            key_map = self._parse_key_map(data["key_map"])

        colors_data = data.get("colors", {}) or {}
        colors = ColorConfig(
            foreground=str(colors_data.get("foreground", defaults.colors.foreground)),
            background=str(colors_data.get("background", defaults.colors.background)),
        )

        return MachineConfig(
            instructions_per_second=ips,
            timer_hz=timer_hz,
            scale=scale,
            font=font,
            rng_seed=rng_seed,
            key_map=key_map,
            colors=colors,
        )

    def _parse_key_map(self, raw: Any) -> Dict[str, int]:
        if not isinstance(raw, dict):
            raise ValueError("Invalid value for 'key_map': must be a mapping of host key to key index")
        key_map: Dict[str, int] = {}
        for host_key, value in raw.items():
            index = self._parse_int(value, f"key_map.{host_key}")
            if not 0 <= index <= 0xF:
                logger.warning("Ignoring key_map entry %r: index %d is not in 0x0-0xF", host_key, index)
                continue
            key_map[str(host_key).upper()] = index
        return key_map

    def _parse_positive(self, data: Dict[str, Any], key: str, default: int) -> int:
        value = self._parse_int(data.get(key, default), key)
        if value <= 0:
            raise ValueError(f"Invalid value for '{key}': must be positive, got {value}")
        return value

    def _parse_int(self, value: Any, key: str = "") -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format for '{key}': {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ValueError(f"Invalid integer format for '{key}': {value}")
