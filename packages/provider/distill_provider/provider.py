"""Provider contract shared by every release hosting backend."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Iterable, Protocol, runtime_checkable

from .errors import Cancelled
from .models import Asset, Release, strip_v

VERSION_LATEST = "latest"


class CancelToken:
    """Cooperative cancellation flag checked around every network call."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise Cancelled("operation cancelled")


@runtime_checkable
class Provider(Protocol):
    @property
    def source(self) -> str: ...

    @property
    def owner(self) -> str: ...

    @property
    def repo(self) -> str: ...

    @property
    def app(self) -> str: ...

    @property
    def cache_id(self) -> str: ...

    @property
    def version(self) -> str: ...

    @property
    def downloads_dir(self) -> Path: ...

    def resolve_release(self, cancel: CancelToken | None = None) -> Release: ...

    def enumerate_assets(self, release: Release, cancel: CancelToken | None = None) -> list[Asset]: ...


def build_cache_id(source: str, owner: str, repo: str, os_name: str, arch: str) -> str:
    return "-".join([source, owner, repo, os_name, arch])


def build_downloads_dir(root: Path, source: str, owner: str, repo: str, version: str) -> Path:
    return Path(root) / source / owner / repo / version


def match_listed_release(
    releases: Iterable[dict],
    version: str,
    include_pre_releases: bool,
) -> dict | None:
    """Return the first listed release that satisfies the selection rules.

    A release matches when pre-releases are permitted and it is one, or when
    its tag equals ``version`` or its name equals ``v{version}``.
    """
    for rel in releases:
        if include_pre_releases and rel.get("prerelease"):
            return rel
        if rel.get("tag_name") == version or rel.get("name") == f"v{version}":
            return rel
    return None


__all__ = [
    "CancelToken",
    "Provider",
    "VERSION_LATEST",
    "build_cache_id",
    "build_downloads_dir",
    "match_listed_release",
    "strip_v",
]
