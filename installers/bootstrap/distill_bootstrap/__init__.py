"""Bootstrap resolver that selects release artifacts for a platform."""

from .resolver import AssetSelectionError, Discovery, RankedAsset, discover, rank
from .service import ResolutionResult, host_target, resolve_app, resolve_with

__all__ = [
    "AssetSelectionError",
    "Discovery",
    "RankedAsset",
    "ResolutionResult",
    "discover",
    "host_target",
    "rank",
    "resolve_app",
    "resolve_with",
]
