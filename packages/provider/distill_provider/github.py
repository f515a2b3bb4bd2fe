"""GitHub Releases backend."""

from __future__ import annotations

from pathlib import Path

from distill_core.config import DistillConfig
from distill_core.logging_setup import get_logger

from .errors import NoAssetsFound, ReleaseNotFound, TransportError
from .models import Asset, Release, strip_v
from .provider import (
    VERSION_LATEST,
    CancelToken,
    build_cache_id,
    build_downloads_dir,
    match_listed_release,
)
from .transport import HttpClient, build_client, next_page

GITHUB_SOURCE = "github"
PER_PAGE = 100

logger = get_logger("github")


def _expect_list(payload, url: str) -> list:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise TransportError(f"expected a JSON list from {url}", url=url)
    return payload


def _release_from_payload(payload: dict) -> Release:
    return Release(
        tag=payload.get("tag_name") or "",
        name=payload.get("name") or "",
        prerelease=bool(payload.get("prerelease")),
        release_id=payload.get("id"),
        raw=payload,
    )


class GitHubProvider:
    def __init__(
        self,
        owner: str,
        repo: str,
        version: str = VERSION_LATEST,
        os_name: str = "",
        arch: str = "",
        config: DistillConfig | None = None,
        client: HttpClient | None = None,
    ) -> None:
        self._owner = owner
        self._repo = repo
        self._version = version or VERSION_LATEST
        self.os_name = os_name
        self.arch = arch
        self.config = config or DistillConfig()
        self._client = client
        self.release: Release | None = None

    @property
    def source(self) -> str:
        return GITHUB_SOURCE

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def repo(self) -> str:
        return self._repo

    @property
    def app(self) -> str:
        return f"{self._owner}/{self._repo}"

    @property
    def version(self) -> str:
        return self._version

    @property
    def cache_id(self) -> str:
        return build_cache_id(self.source, self._owner, self._repo, self.os_name, self.arch)

    @property
    def downloads_dir(self) -> Path:
        return build_downloads_dir(self.config.downloads_path, self.source, self._owner, self._repo, self._version)

    @property
    def client(self) -> HttpClient:
        if self._client is None:
            cache_file = self.config.metadata_path / f"cache-{self.cache_id}"
            token = self.config.github.token
            if token:
                logger.debug("auth token provided", extra={"app": self.app})
            self._client = build_client(cache_file, token=token)
        return self._client

    def _repo_url(self, suffix: str) -> str:
        return f"{self.config.github.base_url}/repos/{self._owner}/{self._repo}{suffix}"

    def _latest(self, cancel: CancelToken | None) -> dict | None:
        url = self._repo_url("/releases/latest")
        try:
            payload, _ = self.client.get_json(url, cancel=cancel)
        except TransportError as exc:
            if exc.not_found:
                logger.debug("no direct latest release, scanning listing", extra={"app": self.app})
                return None
            raise
        if not isinstance(payload, dict):
            raise TransportError(f"expected a JSON object from {url}", url=url)
        return payload

    def _scan_listing(self, cancel: CancelToken | None) -> dict | None:
        page: int | None = 1
        while page is not None:
            url = self._repo_url("/releases")
            releases, headers = self.client.get_json(
                url,
                params={"per_page": PER_PAGE, "page": page},
                cancel=cancel,
            )
            found = match_listed_release(_expect_list(releases, url), self._version, self.config.include_pre_releases)
            if found is not None:
                return found
            page = next_page(headers)
        return None

    def resolve_release(self, cancel: CancelToken | None = None) -> Release:
        payload = None
        if self._version == VERSION_LATEST:
            payload = self._latest(cancel)
        if payload is None:
            payload = self._scan_listing(cancel)
        if payload is None:
            raise ReleaseNotFound(f"release not found for {self.app} version {self._version}")

        release = _release_from_payload(payload)
        self._version = strip_v(release.tag)
        self.release = release
        logger.info(f"installing version: {release.tag}", extra={"event": "release_resolved", "app": self.app})
        return release

    def enumerate_assets(self, release: Release, cancel: CancelToken | None = None) -> list[Asset]:
        assets: list[Asset] = []
        page: int | None = 1
        while page is not None:
            url = self._repo_url(f"/releases/{release.release_id}/assets")
            items, headers = self.client.get_json(
                url,
                params={"per_page": PER_PAGE, "page": page},
                cancel=cancel,
            )
            for item in _expect_list(items, url):
                assets.append(
                    Asset(
                        name=item.get("name") or "",
                        url=item.get("browser_download_url") or "",
                        source=self.source,
                        asset_id=item.get("id"),
                        size=item.get("size"),
                        content_type=item.get("content_type"),
                        provider=self,
                    )
                )
            page = next_page(headers)

        if not assets:
            raise NoAssetsFound(f"no assets found for {self.app} release {release.tag}")
        return assets
