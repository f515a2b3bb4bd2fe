"""Persistent resolver settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


CONFIG_VERSION = 1

GITHUB_API_URL = "https://api.github.com"
GITLAB_API_URL = "https://gitlab.com/api/v4"


class ConfigError(ValueError):
    """Raised when a configuration value has the wrong type."""


def _require(name: str, value: Any, kind: type) -> None:
    if not isinstance(value, kind):
        raise ConfigError(f"{name} must be {kind.__name__}, got {type(value).__name__}")


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "distill"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "distill"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "distill"


def config_path() -> Path:
    return config_root() / "config.json"


def _default_downloads_dir() -> str:
    return str(config_root() / "downloads")


def _default_metadata_dir() -> str:
    return str(config_root() / "metadata")


@dataclass
class GitHubConfig:
    token: str = ""
    base_url: str = GITHUB_API_URL

    def __post_init__(self) -> None:
        _require("github.token", self.token, str)
        _require("github.base_url", self.base_url, str)
        self.base_url = self.base_url.rstrip("/") or GITHUB_API_URL


@dataclass
class GitLabConfig:
    token: str = ""
    base_url: str = GITLAB_API_URL

    def __post_init__(self) -> None:
        _require("gitlab.token", self.token, str)
        _require("gitlab.base_url", self.base_url, str)
        self.base_url = self.base_url.rstrip("/") or GITLAB_API_URL


@dataclass
class DistillConfig:
    config_version: int = CONFIG_VERSION
    downloads_dir: str = field(default_factory=_default_downloads_dir)
    metadata_dir: str = field(default_factory=_default_metadata_dir)
    include_pre_releases: bool = False
    github: GitHubConfig = field(default_factory=GitHubConfig)
    gitlab: GitLabConfig = field(default_factory=GitLabConfig)

    def __post_init__(self) -> None:
        _require("downloads_dir", self.downloads_dir, str)
        _require("metadata_dir", self.metadata_dir, str)
        _require("include_pre_releases", self.include_pre_releases, bool)
        _require("github", self.github, GitHubConfig)
        _require("gitlab", self.gitlab, GitLabConfig)

    @property
    def downloads_path(self) -> Path:
        return Path(self.downloads_dir).expanduser()

    @property
    def metadata_path(self) -> Path:
        return Path(self.metadata_dir).expanduser()


def _section(dataclass_type, raw: Any):
    if not isinstance(raw, dict):
        return dataclass_type()
    known = {k: v for k, v in raw.items() if k in dataclass_type.__dataclass_fields__}
    return dataclass_type(**known)


def _env_token(*names: str) -> str:
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return ""


def _apply_env(cfg: DistillConfig) -> None:
    if not cfg.github.token:
        cfg.github.token = _env_token("DISTILL_GITHUB_TOKEN", "GITHUB_TOKEN")
    if not cfg.gitlab.token:
        cfg.gitlab.token = _env_token("DISTILL_GITLAB_TOKEN", "GITLAB_TOKEN")


def load_config(path: Path | None = None) -> DistillConfig:
    """Load settings from ``path``; a missing or unreadable file yields defaults.

    Values of the wrong type raise ``ConfigError`` rather than being coerced.
    """
    path = path or config_path()
    raw: dict[str, Any] = {}
    if path.exists():
        try:
            loaded = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            loaded = {}
        if isinstance(loaded, dict):
            raw = loaded

    defaults = DistillConfig()
    cfg = DistillConfig(
        config_version=int(raw.get("config_version", CONFIG_VERSION)),
        downloads_dir=raw.get("downloads_dir", defaults.downloads_dir),
        metadata_dir=raw.get("metadata_dir", defaults.metadata_dir),
        include_pre_releases=raw.get("include_pre_releases", False),
        github=_section(GitHubConfig, raw.get("github")),
        gitlab=_section(GitLabConfig, raw.get("gitlab")),
    )
    _apply_env(cfg)
    return cfg


def save_config(cfg: DistillConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
