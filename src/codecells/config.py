"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

DEFAULT_ASSETS_DIR_NAME = ".codecells_assets"
CONFIG_FILE_NAME = "codecells.toml"

MAX_PREVIEW_WIDTH_CAP = 1_000
MAX_PREVIEW_LINES_CAP = 10_000
MAX_PREVIEW_CHARS_CAP = 1024 * 1024


@dataclass(slots=True, frozen=True)
class PreviewConfig:
    """Bounds applied by the default text preview renderer."""

    width: int = 80
    depth: int = 6
    max_lines: int = 40
    max_chars: int = 4_000


@dataclass(slots=True, frozen=True)
class WatchConfig:
    """File watch loop settings."""

    backoff_seconds: float = 0.1
    polling: bool = False
    poll_interval_seconds: float = 0.5


@dataclass(slots=True, frozen=True)
class CodeCellsConfig:
    """Fully merged runtime configuration."""

    root: Path
    assets_dir_name: str
    journal_path: Path | None
    figure_renderers: bool
    preview: PreviewConfig
    watch: WatchConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "root": str(self.root),
            "assets_dir_name": self.assets_dir_name,
            "journal_path": str(self.journal_path) if self.journal_path is not None else None,
            "figure_renderers": self.figure_renderers,
            "preview": {
                "width": self.preview.width,
                "depth": self.preview.depth,
                "max_lines": self.preview.max_lines,
                "max_chars": self.preview.max_chars,
            },
            "watch": {
                "backoff_seconds": self.watch.backoff_seconds,
                "polling": self.watch.polling,
                "poll_interval_seconds": self.watch.poll_interval_seconds,
            },
        }


@dataclass(slots=True, frozen=True)
class ConfigOverrides:
    """Optional startup overrides applied at highest precedence."""

    journal_path: Path | None = None
    assets_dir_name: str | None = None
    preview_width: int | None = None
    preview_max_lines: int | None = None
    polling: bool | None = None


def default_config(root: Path) -> CodeCellsConfig:
    """Build default config for a given project root."""
    return CodeCellsConfig(
        root=root.resolve(),
        assets_dir_name=DEFAULT_ASSETS_DIR_NAME,
        journal_path=None,
        figure_renderers=False,
        preview=PreviewConfig(),
        watch=WatchConfig(),
    )


def load_config_file(root: Path) -> dict[str, object]:
    """Load optional codecells.toml from the project root."""
    config_path = root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def merge_config(
    base: CodeCellsConfig, payload: dict[str, object], overrides: ConfigOverrides
) -> CodeCellsConfig:
    """Merge defaults, the config file, then startup overrides."""
    preview_payload = _get_table(payload, "preview")
    watch_payload = _get_table(payload, "watch")

    assets_dir_name = base.assets_dir_name
    if "assets_dir_name" in payload:
        assets_dir_name = _directory_name(payload["assets_dir_name"], "assets_dir_name")

    journal_path = base.journal_path
    if "journal_path" in payload:
        raw_journal = payload["journal_path"]
        if not isinstance(raw_journal, str) or not raw_journal.strip():
            raise ValueError("Config field 'journal_path' must be a non-empty string.")
        journal_path = (base.root / raw_journal).resolve()

    figure_renderers = base.figure_renderers
    if "figure_renderers" in payload:
        raw_figures = payload["figure_renderers"]
        if not isinstance(raw_figures, bool):
            raise ValueError("Config field 'figure_renderers' must be a boolean.")
        figure_renderers = raw_figures

    preview = PreviewConfig(
        width=_optional_positive_int_with_cap(
            preview_payload.get("width"),
            "preview.width",
            base.preview.width,
            MAX_PREVIEW_WIDTH_CAP,
        ),
        depth=_optional_positive_int_with_cap(
            preview_payload.get("depth"), "preview.depth", base.preview.depth, cap=None
        ),
        max_lines=_optional_positive_int_with_cap(
            preview_payload.get("max_lines"),
            "preview.max_lines",
            base.preview.max_lines,
            MAX_PREVIEW_LINES_CAP,
        ),
        max_chars=_optional_positive_int_with_cap(
            preview_payload.get("max_chars"),
            "preview.max_chars",
            base.preview.max_chars,
            MAX_PREVIEW_CHARS_CAP,
        ),
    )

    polling = base.watch.polling
    if "polling" in watch_payload:
        raw_polling = watch_payload["polling"]
        if not isinstance(raw_polling, bool):
            raise ValueError("Config field 'watch.polling' must be a boolean.")
        polling = raw_polling
    watch = WatchConfig(
        backoff_seconds=_optional_positive_float(
            watch_payload.get("backoff_seconds"),
            "watch.backoff_seconds",
            base.watch.backoff_seconds,
        ),
        polling=polling,
        poll_interval_seconds=_optional_positive_float(
            watch_payload.get("poll_interval_seconds"),
            "watch.poll_interval_seconds",
            base.watch.poll_interval_seconds,
        ),
    )

    merged = CodeCellsConfig(
        root=base.root,
        assets_dir_name=assets_dir_name,
        journal_path=journal_path,
        figure_renderers=figure_renderers,
        preview=preview,
        watch=watch,
    )
    return apply_overrides(merged, overrides)


def apply_overrides(config: CodeCellsConfig, overrides: ConfigOverrides) -> CodeCellsConfig:
    """Apply startup overrides at highest precedence."""
    preview = PreviewConfig(
        width=_optional_positive_int_with_cap(
            overrides.preview_width,
            "overrides.preview_width",
            config.preview.width,
            MAX_PREVIEW_WIDTH_CAP,
        ),
        depth=config.preview.depth,
        max_lines=_optional_positive_int_with_cap(
            overrides.preview_max_lines,
            "overrides.preview_max_lines",
            config.preview.max_lines,
            MAX_PREVIEW_LINES_CAP,
        ),
        max_chars=config.preview.max_chars,
    )
    watch = WatchConfig(
        backoff_seconds=config.watch.backoff_seconds,
        polling=overrides.polling if overrides.polling is not None else config.watch.polling,
        poll_interval_seconds=config.watch.poll_interval_seconds,
    )
    assets_dir_name = config.assets_dir_name
    if overrides.assets_dir_name is not None:
        assets_dir_name = _directory_name(overrides.assets_dir_name, "overrides.assets_dir_name")
    journal_path = config.journal_path
    if overrides.journal_path is not None:
        journal_path = overrides.journal_path.resolve()
    return CodeCellsConfig(
        root=config.root,
        assets_dir_name=assets_dir_name,
        journal_path=journal_path,
        figure_renderers=config.figure_renderers,
        preview=preview,
        watch=watch,
    )


def load_effective_config(root: Path, overrides: ConfigOverrides | None = None) -> CodeCellsConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved_root = root.resolve()
    base = default_config(resolved_root)
    payload = load_config_file(resolved_root)
    return merge_config(base, payload, overrides or ConfigOverrides())


def _directory_name(value: object, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    if "/" in value or "\\" in value or value in {".", ".."}:
        raise ValueError(f"Config field '{name}' must be a single directory name.")
    return value


def _optional_positive_float(value: object, name: str, default: float) -> float:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"Config field '{name}' must be a positive number.")
    return float(value)


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
