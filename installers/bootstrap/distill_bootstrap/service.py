"""Shared resolution service used by the CLI: release, assets, then selection."""

from __future__ import annotations

import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from distill_core.config import DistillConfig
from distill_core.logging_setup import get_logger
from distill_core.targets import PlatformTarget, resolve_target
from distill_provider.models import Release
from distill_provider.provider import CancelToken, Provider
from distill_provider.registry import AppRef, create_provider
from distill_provider.transport import HttpClient

from .resolver import Discovery, discover

ProgressCallback = Callable[[str], None]

logger = get_logger("bootstrap")


@dataclass(frozen=True)
class ResolutionResult:
    app: str
    source: str
    target: PlatformTarget
    release: Release
    version: str
    downloads_dir: Path
    discovery: Discovery


def host_target() -> PlatformTarget:
    return resolve_target(platform.system(), platform.machine())


def resolve_with(
    provider: Provider,
    target: PlatformTarget,
    cancel: CancelToken | None = None,
    progress: ProgressCallback | None = None,
) -> ResolutionResult:
    progress = progress or (lambda _msg: None)

    progress(f"Resolving release for {provider.app}")
    release = provider.resolve_release(cancel)

    progress(f"Listing assets of {release.tag}")
    assets = provider.enumerate_assets(release, cancel)

    progress(f"Ranking {len(assets)} assets for {target.os_name}/{target.arch}")
    found = discover(assets, target, names=[provider.repo])
    logger.info(
        f"selected {found.binary.asset.name} score={found.binary.score}",
        extra={"event": "asset_selected", "app": provider.app, "source": provider.source},
    )

    return ResolutionResult(
        app=provider.app,
        source=provider.source,
        target=target,
        release=release,
        version=provider.version,
        downloads_dir=provider.downloads_dir,
        discovery=found,
    )


def resolve_app(
    ref: AppRef,
    config: DistillConfig,
    target: PlatformTarget | None = None,
    cancel: CancelToken | None = None,
    client: HttpClient | None = None,
    progress: ProgressCallback | None = None,
) -> ResolutionResult:
    target = target or host_target()
    provider = create_provider(ref, os_name=target.os_name, arch=target.arch, config=config, client=client)
    return resolve_with(provider, target, cancel=cancel, progress=progress)
