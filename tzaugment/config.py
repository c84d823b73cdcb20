from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

import yaml

from tzaugment.loggingSetup import mapLogLevel

ENV_PREFIX = "TZAUGMENT_"


@dataclass(frozen=True)
class Settings:
    # Paths
    log_dir: str = "./logs"
    report_dir: str = "./reports"

    # Logging
    log_level: str = "INFO"

    # Input/output
    input_encoding: str = "utf-8-sig"
    delimiter: str = ","

    # Resolver
    drop_ocean_zones: bool = True
    in_memory_index: bool = False

    # Report / exit policy
    report_items_limit: int = 200
    fail_on_degraded: bool = False


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    sources_used: list[str]


def _read_yaml_config(path: Path) -> dict:
    if not path.exists():
        return {}
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        return data


def _env_get(name: str) -> str | None:
    v = os.getenv(ENV_PREFIX + name.upper())
    if v is None or v.strip() == "":
        return None
    return v.strip()


def parse_bool(v: str | bool | None) -> bool | None:
    if v is None or isinstance(v, bool):
        return v
    vv = str(v).strip().lower()
    if vv in ("1", "true", "yes", "y"):
        return True
    if vv in ("0", "false", "no", "n"):
        return False
    raise ValueError(f"Invalid boolean value: {v}")


def parse_int(v: str | int | None) -> int | None:
    if v is None or isinstance(v, int):
        return v
    return int(v)


_CONVERTERS = {
    "log_dir": str,
    "report_dir": str,
    "log_level": str,
    "input_encoding": str,
    "delimiter": str,
    "drop_ocean_zones": parse_bool,
    "in_memory_index": parse_bool,
    "report_items_limit": parse_int,
    "fail_on_degraded": parse_bool,
}


def _validate(settings: Settings) -> None:
    mapLogLevel(settings.log_level)
    if len(settings.delimiter) != 1:
        raise ValueError(f"delimiter must be a single character, got {settings.delimiter!r}")
    if settings.report_items_limit < 0:
        raise ValueError(f"report_items_limit must be >= 0, got {settings.report_items_limit}")


def loadSettings(
    config_path: str | None,
    cli_overrides: dict,
) -> LoadedSettings:
    """
    Назначение:
        Загружает итоговые настройки.

    Алгоритм:
        Priority: CLI > ENV > config > defaults

    Поведение:
        - Некорректные значения (уровень логов, разделитель, bool/int) -> ValueError.
    """
    sources: list[str] = []
    defaults = Settings()

    # 1) config file
    cfg: dict = {}
    if config_path:
        cfg = _read_yaml_config(Path(config_path))
        if cfg:
            sources.append("config")

    # 2) env
    env = {key: _env_get(key) for key in _CONVERTERS}
    if any(v is not None for v in env.values()):
        sources.append("env")

    # merge defaults -> config -> env -> cli
    merged = {key: cfg.get(key, getattr(defaults, key)) for key in _CONVERTERS}

    for key, value in env.items():
        if value is not None:
            merged[key] = value

    # 3) apply CLI overrides (only those explicitly passed)
    if any(v is not None for v in cli_overrides.values()):
        sources.append("cli")

    for k, v in cli_overrides.items():
        if v is None:
            continue
        merged[k] = v

    settings = Settings(**{key: _CONVERTERS[key](value) for key, value in merged.items()})
    _validate(settings)

    return LoadedSettings(settings=settings, sources_used=sources)
