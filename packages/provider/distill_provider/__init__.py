"""Release hosting backends behind a common provider contract."""

from .errors import Cancelled, DistillError, NoAssetsFound, ReleaseNotFound, TransportError
from .github import GitHubProvider
from .gitlab import GitLabProvider
from .models import Asset, Release
from .provider import VERSION_LATEST, CancelToken, Provider
from .registry import PROVIDERS, AppRef, create_provider, parse_app_ref
from .transport import DiskCache, HttpClient, NullCache, build_client

__all__ = [
    "AppRef",
    "Asset",
    "CancelToken",
    "Cancelled",
    "DiskCache",
    "DistillError",
    "GitHubProvider",
    "GitLabProvider",
    "HttpClient",
    "NoAssetsFound",
    "NullCache",
    "PROVIDERS",
    "Provider",
    "Release",
    "ReleaseNotFound",
    "TransportError",
    "VERSION_LATEST",
    "build_client",
    "create_provider",
    "parse_app_ref",
]
