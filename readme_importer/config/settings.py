# Importer settings, read from the environment (and a local .env file).

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from readme_importer.importing.domain.models import AssetMode

ENV_PREFIX = "README_IMPORTER_"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ImporterSettings:
    vault_dir: Path = Path(".")
    note_path: Path = Path("README.md")
    assets_dir: str = "assets"
    asset_mode: AssetMode = AssetMode.REWRITE
    github_host: str = "github.com"
    api_base: str = "https://api.github.com"
    branch: str = "main"
    github_token: str | None = None
    timeout_seconds: float = 45.0
    concurrency: int = 5
    strip_layout_tags: bool = True
    show_progress: bool = True

    @property
    def resolved_note_path(self) -> Path:
        if self.note_path.is_absolute():
            return self.note_path
        return self.vault_dir / self.note_path


def _get(env: Mapping[str, str], key: str) -> str | None:
    value = env.get(f"{ENV_PREFIX}{key}")
    if value is None or not value.strip():
        return None
    return value.strip()


def _as_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    value = _get(env, key)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{ENV_PREFIX}{key} must be a boolean, got {value!r}")


def _as_number(env: Mapping[str, str], key: str, default, cast):
    value = _get(env, key)
    if value is None:
        return default
    try:
        number = cast(value)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{key} must be a number, got {value!r}") from exc
    if number <= 0:
        raise ValueError(f"{ENV_PREFIX}{key} must be positive, got {value!r}")
    return number


def _as_asset_mode(env: Mapping[str, str]) -> AssetMode:
    value = _get(env, "ASSET_MODE")
    if value is None:
        return AssetMode.REWRITE
    try:
        return AssetMode(value.lower())
    except ValueError as exc:
        choices = ", ".join(mode.value for mode in AssetMode)
        raise ValueError(f"{ENV_PREFIX}ASSET_MODE must be one of {choices}, got {value!r}") from exc


def settings_from_env(env: Mapping[str, str]) -> ImporterSettings:
    defaults = ImporterSettings()
    return ImporterSettings(
        vault_dir=Path(_get(env, "VAULT_DIR") or defaults.vault_dir),
        note_path=Path(_get(env, "NOTE_PATH") or defaults.note_path),
        assets_dir=_get(env, "ASSETS_DIR") or defaults.assets_dir,
        asset_mode=_as_asset_mode(env),
        github_host=_get(env, "GITHUB_HOST") or defaults.github_host,
        api_base=(_get(env, "API_BASE") or defaults.api_base).rstrip("/"),
        branch=_get(env, "BRANCH") or defaults.branch,
        github_token=_get(env, "GITHUB_TOKEN") or (env.get("GITHUB_TOKEN") or "").strip() or None,
        timeout_seconds=_as_number(env, "TIMEOUT_SECONDS", defaults.timeout_seconds, float),
        concurrency=_as_number(env, "CONCURRENCY", defaults.concurrency, int),
        strip_layout_tags=_as_bool(env, "STRIP_LAYOUT_TAGS", defaults.strip_layout_tags),
        show_progress=_as_bool(env, "SHOW_PROGRESS", defaults.show_progress),
    )


def load_settings(dotenv_path: str | Path | None = None) -> ImporterSettings:
    load_dotenv(dotenv_path)
    return settings_from_env(os.environ)
