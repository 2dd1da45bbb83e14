"""User configuration: colours, font size, shell command and opacity."""

from __future__ import annotations

import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import platformdirs

Color = tuple[int, int, int]


class ConfigError(ValueError):
    """Raised when the configuration cannot be read or has invalid values."""


@dataclass(frozen=True)
class Colors:
    foreground: Color = (0xC0, 0xC0, 0xC0)
    background: Color = (0x00, 0x00, 0x00)
    cursor: Color = (0xC0, 0xC0, 0xC0)
    cursor_text: Color = (0x00, 0x00, 0x00)


@dataclass(frozen=True)
class Config:
    font_size: float = 15.0
    shell: tuple[str, ...] = ("bash", "-i")
    colors: Colors = field(default_factory=Colors)
    background_opacity: float = 1.0
    macos_transparent_titlebar: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a config from a mapping laid over the defaults; unknown keys are ignored."""
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a table")
        merged = _deep_merge(asdict(cls()), data)

        colors_data = merged["colors"]
        if not isinstance(colors_data, dict):
            raise ConfigError("colors must be a table")
        colors = Colors(
            **{
                name: _color(f"colors.{name}", colors_data[name])
                for name in ("foreground", "background", "cursor", "cursor_text")
            }
        )

        return cls(
            font_size=_number("font_size", merged["font_size"]),
            shell=_shell(merged["shell"]),
            colors=colors,
            background_opacity=_number("background_opacity", merged["background_opacity"]),
            macos_transparent_titlebar=_flag(
                "macos_transparent_titlebar", merged["macos_transparent_titlebar"]
            ),
        )

    @classmethod
    def load(cls, path: str | Path | None = None) -> Config:
        """Load the config file, falling back to defaults when it does not exist."""
        if path is None:
            path = default_config_path()
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError:
                pass
        path = Path(path)
        try:
            with path.open("rb") as fh:
                data = tomllib.load(fh)
        except FileNotFoundError:
            data = {}
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"{path}: {exc}") from exc
        return cls.from_dict(data)


def default_config_path() -> Path:
    """Return the per-user location of ``config.toml``."""
    try:
        return Path(platformdirs.user_config_dir("bnuuy", "scar")) / "config.toml"
    except (OSError, KeyError):
        return Path("config.toml")


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    return float(value)


def _flag(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false, got {value!r}")
    return value


def _shell(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)) or not all(isinstance(part, str) for part in value):
        raise ConfigError(f"shell must be a list of strings, got {value!r}")
    return tuple(value)


def _color(name: str, value: Any) -> Color:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ConfigError(f"{name} must be three integers, got {value!r}")
    for component in value:
        if isinstance(component, bool) or not isinstance(component, int) or not 0 <= component <= 255:
            raise ConfigError(f"{name} components must be integers in 0..255, got {value!r}")
    r, g, b = value
    return (r, g, b)