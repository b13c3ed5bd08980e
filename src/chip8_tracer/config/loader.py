import yaml
from typing import Any, Dict, Optional
from .models import DisplayConfig, ERROR_POLICIES, ROM_FORMATS, SystemConfig

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> SystemConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")
        defaults = SystemConfig()

        rom_format = str(data.get("format", defaults.format)).lower()
        if rom_format not in ROM_FORMATS:
            raise ValueError(f"Invalid ROM format: {rom_format}")

        on_error = str(data.get("on_error", defaults.on_error)).lower()
        if on_error not in ERROR_POLICIES:
            raise ValueError(f"Invalid error policy: {on_error}")

        log_level = str(data.get("log_level", defaults.log_level)).upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {log_level}")

        cpu_hz = self._parse_int(data.get("cpu_hz", defaults.cpu_hz))
        if cpu_hz <= 0:
            raise ValueError(f"cpu_hz must be positive: {cpu_hz}")

        history_size = self._parse_int(data.get("history_size", defaults.history_size))
        if history_size < 1:
            raise ValueError(f"history_size must be at least 1: {history_size}")

        seed = data.get("random_seed")
        rom = data.get("rom")

        return SystemConfig(
            rom=str(rom) if rom is not None else None,
            format=rom_format,
            cpu_hz=cpu_hz,
            on_error=on_error,
            log_level=log_level,
            random_seed=self._parse_int(seed) if seed is not None else None,
            history_size=history_size,
            display=self._parse_display(data.get("display", {})),
            key_map=self._parse_key_map(data.get("key_map")),
        )

    def _parse_display(self, data: Optional[Dict[str, Any]]) -> DisplayConfig:
        defaults = DisplayConfig()
        data = data or {}
        scale = self._parse_int(data.get("scale", defaults.scale))
        if scale <= 0:
            raise ValueError(f"Display scale must be positive: {scale}")
        return DisplayConfig(
            scale=scale,
            foreground=str(data.get("foreground", defaults.foreground)),
            background=str(data.get("background", defaults.background)),
        )

    def _parse_key_map(self, data: Optional[Dict[Any, Any]]) -> Dict[str, int]:
        if data is None:
            return SystemConfig().key_map
        key_map = {}
        for host_key, value in data.items():
            chip8_key = self._parse_int(value)
            if not 0 <= chip8_key <= 0xF:
                raise ValueError(f"Key map entry {host_key!r} -> {value!r} is not in 0x0-0xF")
            # YAMLでは 1 や 2 が整数として読まれるため、キー名は文字列に揃える
            key_map[str(host_key)] = chip8_key
        return key_map

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                raise ValueError(f"Invalid integer format: {value}") from None
        raise ValueError(f"Invalid integer format: {value}")
