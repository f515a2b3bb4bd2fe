"""Provider lookup by source slug and app reference parsing."""

from __future__ import annotations

from dataclasses import dataclass

from distill_core.config import DistillConfig

from .github import GITHUB_SOURCE, GitHubProvider
from .gitlab import GITLAB_SOURCE, GitLabProvider
from .provider import VERSION_LATEST, Provider
from .transport import HttpClient

PROVIDERS = {
    GITHUB_SOURCE: GitHubProvider,
    GITLAB_SOURCE: GitLabProvider,
}


@dataclass(frozen=True)
class AppRef:
    source: str
    owner: str
    repo: str
    version: str = VERSION_LATEST


def parse_app_ref(ref: str, default_source: str = GITHUB_SOURCE) -> AppRef:
    """Parse ``[source/]owner/repo[@version]``.

    >>> parse_app_ref("gitlab/group/tool@1.2.0")
    AppRef(source='gitlab', owner='group', repo='tool', version='1.2.0')
    """
    name, _, version = ref.strip().partition("@")
    parts = [p for p in name.split("/") if p]
    if len(parts) == 3:
        source, owner, repo = parts
    elif len(parts) == 2:
        source = default_source
        owner, repo = parts
    else:
        raise ValueError(f"expected [source/]owner/repo[@version], got {ref!r}")
    if source not in PROVIDERS:
        raise ValueError(f"unknown source {source!r}; expected one of {sorted(PROVIDERS)}")
    return AppRef(source=source, owner=owner, repo=repo, version=version or VERSION_LATEST)


def create_provider(
    ref: AppRef,
    os_name: str,
    arch: str,
    config: DistillConfig | None = None,
    client: HttpClient | None = None,
) -> Provider:
    provider_cls = PROVIDERS[ref.source]
    return provider_cls(
        owner=ref.owner,
        repo=ref.repo,
        version=ref.version,
        os_name=os_name,
        arch=arch,
        config=config,
        client=client,
    )
