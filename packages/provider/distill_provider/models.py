"""Typed models for discovered releases and their attached files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def strip_v(tag: str) -> str:
    return tag[1:] if tag.startswith("v") else tag


@dataclass(frozen=True)
class Release:
    tag: str
    name: str
    prerelease: bool
    release_id: int | str
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def version(self) -> str:
        return strip_v(self.tag)


@dataclass(frozen=True)
class Asset:
    name: str
    url: str
    source: str
    asset_id: int | None = None
    size: int | None = None
    content_type: str | None = None
    provider: Any = field(default=None, compare=False, repr=False)
