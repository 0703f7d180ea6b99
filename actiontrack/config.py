"""Tracker configuration and environment setup."""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

type ConfigDict = dict[str, str | int | bool | list[str]]

CATEGORY_PALETTE = ("#3b82f6", "#ef4444", "#22c55e", "#f59e0b", "#8b5cf6", "#06b6d4")
UNSPECIFIED_CATEGORY = "Unspecified"
WEEKLY_BUCKET_LIMIT = 8


@dataclass(frozen=True)
class ImportConfig:
    accepted_extensions: tuple[str, ...] = (".xlsx", ".xls", ".xlsm")
    skip_duplicates: bool = False


@dataclass(frozen=True)
class AnalyticsConfig:
    palette: tuple[str, ...] = CATEGORY_PALETTE
    unspecified_label: str = UNSPECIFIED_CATEGORY
    weekly_bucket_limit: int = WEEKLY_BUCKET_LIMIT


@dataclass(frozen=True)
class TrackerConfig:
    imports: ImportConfig = field(default_factory=ImportConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    log_level: str = "INFO"
    strict_validation: bool = True


def load_tracker_config(
    env: str = "production",
    overrides: ConfigDict | None = None,
) -> TrackerConfig:
    match env:
        case "production":
            config = TrackerConfig(log_level="WARNING", strict_validation=True)
        case "staging":
            config = TrackerConfig(log_level="INFO", strict_validation=True)
        case "development":
            config = TrackerConfig(log_level="DEBUG", strict_validation=False)
        case other:
            raise ValueError(f"Unknown environment: {other}")

    if overrides:
        config = _apply_overrides(config, overrides)
    return config


def _apply_overrides(config: TrackerConfig, overrides: ConfigDict) -> TrackerConfig:
    imports = config.imports
    analytics = config.analytics
    top = {}

    for key, value in overrides.items():
        match key:
            case "accepted_extensions":
                imports = replace(imports, accepted_extensions=tuple(value))
            case "skip_duplicates":
                imports = replace(imports, skip_duplicates=bool(value))
            case "palette":
                if not value:
                    raise ValueError("palette needs at least one color")
                analytics = replace(analytics, palette=tuple(value))
            case "unspecified_label":
                analytics = replace(analytics, unspecified_label=str(value))
            case "weekly_bucket_limit":
                analytics = replace(analytics, weekly_bucket_limit=int(value))
            case "log_level":
                top["log_level"] = str(value).upper()
            case "strict_validation":
                top["strict_validation"] = bool(value)
            case unknown:
                raise ValueError(f"Unknown config key: {unknown}")

    return replace(config, imports=imports, analytics=analytics, **top)


def get_env_config(pyproject: Path | None = None) -> ConfigDict:
    """Read tracker overrides from the ``[tool.actiontrack]`` table of pyproject.toml."""
    pyproject = pyproject or Path(__file__).parent.parent / "pyproject.toml"
    if not pyproject.exists():
        return {}
    with open(pyproject, "rb") as f:
        data = tomllib.load(f)
    return data.get("tool", {}).get("actiontrack", {})
