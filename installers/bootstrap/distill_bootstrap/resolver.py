"""Ranking and selection of release assets for a target platform."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from distill_core.score import ScoreOptions, detect_extension, score
from distill_core.targets import (
    CHECKSUM_EXTENSIONS,
    CHECKSUM_NAMES,
    KEY_FILE_EXTENSIONS,
    SIGNATURE_EXTENSIONS,
    PlatformTarget,
    checksum_options,
    key_options,
    score_options_for,
    signature_options,
)
from distill_provider.errors import DistillError
from distill_provider.models import Asset


class AssetSelectionError(DistillError):
    kind = "asset_selection_failed"


@dataclass(frozen=True)
class RankedAsset:
    asset: Asset
    score: int


@dataclass(frozen=True)
class Discovery:
    binary: RankedAsset
    checksum: RankedAsset | None
    signature: RankedAsset | None
    key: RankedAsset | None
    candidates: tuple[RankedAsset, ...]


def rank(assets: list[Asset], opts: ScoreOptions) -> list[RankedAsset]:
    """Score assets and order them by score, keeping input order on ties."""
    scored = score([a.name for a in assets], opts)
    ranked = [RankedAsset(asset=a, score=s.value) for a, s in zip(assets, scored)]
    ranked.sort(key=lambda r: r.score, reverse=True)
    return ranked


def _is_text(asset: Asset) -> bool:
    return detect_extension(asset.name) in CHECKSUM_EXTENSIONS


def _is_checksum(asset: Asset) -> bool:
    """A manifest needs a conventional name or a ``sha*`` extension; plain ``.txt`` is not enough."""
    lower = asset.name.lower()
    return detect_extension(lower).startswith("sha") or any(n in lower for n in CHECKSUM_NAMES)


def _has_extension(asset: Asset, extensions: Iterable[str]) -> bool:
    return detect_extension(asset.name) in extensions


def _best(assets: list[Asset], opts: ScoreOptions) -> RankedAsset | None:
    if not assets:
        return None
    top = rank(assets, opts)[0]
    return top if top.score > 0 else None


def discover(assets: list[Asset], target: PlatformTarget, names: Iterable[str] = ()) -> Discovery:
    """Pick the best binary for ``target`` plus its checksum, signature, and key files."""
    names = tuple(names)
    checksums = [a for a in assets if _is_checksum(a)]
    signatures = [a for a in assets if _has_extension(a, SIGNATURE_EXTENSIONS)]
    keys = [a for a in assets if _has_extension(a, KEY_FILE_EXTENSIONS)]
    texts = [a for a in assets if _is_text(a)]
    companions = {id(a) for a in checksums + texts + signatures + keys}
    binaries = [a for a in assets if id(a) not in companions]

    candidates = rank(binaries, score_options_for(target, names))
    if not candidates or candidates[0].score <= 0:
        raise AssetSelectionError(f"No asset found for {target.os_name}/{target.arch}")
    binary = candidates[0]

    stem = (binary.asset.name,)
    return Discovery(
        binary=binary,
        checksum=_best(checksums, checksum_options(names + stem)),
        signature=_best(signatures, signature_options(target, names + stem)),
        key=_best(keys, key_options(target, names)),
        candidates=tuple(candidates),
    )
