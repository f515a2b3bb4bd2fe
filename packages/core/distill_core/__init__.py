"""Core services for artifact scoring, target platforms, settings, and logging."""

from .config import ConfigError, DistillConfig, GitHubConfig, GitLabConfig, load_config, save_config
from .logging_setup import configure_logging, get_logger
from .score import ScoreOptions, ScoredCandidate, UNKNOWN_EXTENSION, detect_extension, score, score_name
from .targets import PlatformTarget, resolve_target, score_options_for

__all__ = [
    "ConfigError",
    "DistillConfig",
    "GitHubConfig",
    "GitLabConfig",
    "PlatformTarget",
    "ScoreOptions",
    "ScoredCandidate",
    "UNKNOWN_EXTENSION",
    "configure_logging",
    "detect_extension",
    "get_logger",
    "load_config",
    "resolve_target",
    "save_config",
    "score",
    "score_name",
    "score_options_for",
]
