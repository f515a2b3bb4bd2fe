"""GitLab Releases backend.

GitLab returns the attached files as links embedded in the release payload,
so asset enumeration issues no extra request. Explicit versions are looked up
by tag directly; there is no listing fallback.
"""

from __future__ import annotations

import posixpath
import urllib.parse
from pathlib import Path

from distill_core.config import DistillConfig
from distill_core.logging_setup import get_logger

from .errors import NoAssetsFound, ReleaseNotFound, TransportError
from .models import Asset, Release, strip_v
from .provider import VERSION_LATEST, CancelToken, build_cache_id, build_downloads_dir
from .transport import HttpClient, build_client

GITLAB_SOURCE = "gitlab"

logger = get_logger("gitlab")


def _link_filename(link: dict) -> str:
    url = link.get("url") or link.get("direct_asset_url") or ""
    name = posixpath.basename(urllib.parse.urlparse(url).path)
    return name or link.get("name") or ""


class GitLabProvider:
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
        return GITLAB_SOURCE

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
            self._client = build_client(cache_file, token=self.config.gitlab.token)
        return self._client

    def _releases_url(self) -> str:
        project = urllib.parse.quote(self.app, safe="")
        return f"{self.config.gitlab.base_url}/projects/{project}/releases"

    def resolve_release(self, cancel: CancelToken | None = None) -> Release:
        if self._version == VERSION_LATEST:
            url = f"{self._releases_url()}/permalink/latest"
        else:
            url = f"{self._releases_url()}/{urllib.parse.quote(self._version, safe='')}"

        try:
            payload, _ = self.client.get_json(url, cancel=cancel)
        except TransportError as exc:
            if exc.not_found:
                raise ReleaseNotFound(f"no release found for {self.app} version {self._version}") from exc
            raise

        if not isinstance(payload, dict) or not payload.get("tag_name"):
            raise ReleaseNotFound(f"no release found for {self.app} version {self._version}")

        release = Release(
            tag=payload["tag_name"],
            name=payload.get("name") or "",
            prerelease=bool(payload.get("upcoming_release")),
            release_id=payload["tag_name"],
            raw=payload,
        )
        self._version = strip_v(release.tag)
        self.release = release
        logger.info(f"installing version: {release.tag}", extra={"event": "release_resolved", "app": self.app})
        return release

    def enumerate_assets(self, release: Release, cancel: CancelToken | None = None) -> list[Asset]:
        if cancel is not None:
            cancel.raise_if_cancelled()

        links = (release.raw.get("assets") or {}).get("links") or []
        assets = [
            Asset(
                name=_link_filename(link),
                url=link.get("direct_asset_url") or link.get("url") or "",
                source=self.source,
                asset_id=link.get("id"),
                provider=self,
            )
            for link in links
        ]
        if not assets:
            raise NoAssetsFound(f"no assets found for {self.app} release {release.tag}")
        return assets
