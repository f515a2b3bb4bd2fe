"""Additive scoring of release asset filenames against platform criteria."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

UNKNOWN_EXTENSION = "unknown"
KEY_EXTENSIONS = frozenset({"pem", "pub"})

OS_WEIGHT = 35
ARCH_WEIGHT = 35
EXTENSION_WEIGHT = 20
KEY_EXTENSION_WEIGHT = 40
NAME_WEIGHT = 10


def _normalize(values: Iterable[str] | None) -> tuple[str, ...]:
    if not values:
        return ()
    return tuple(v.strip().lower() for v in values if v and v.strip())


@dataclass(frozen=True)
class ScoreOptions:
    """Match criteria for one scoring call.

    Every token is lower-cased on construction so comparisons are
    case-insensitive. Empty ``os``/``arch`` disable that criterion.
    """

    os: tuple[str, ...] = ()
    arch: tuple[str, ...] = ()
    extensions: tuple[str, ...] = ()
    names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "os", _normalize(self.os))
        object.__setattr__(self, "arch", _normalize(self.arch))
        object.__setattr__(self, "extensions", _normalize(e.lstrip(".") for e in self.extensions or ()))
        object.__setattr__(self, "names", _normalize(self.names))


@dataclass(frozen=True)
class ScoredCandidate:
    key: str
    value: int


def detect_extension(filename: str) -> str:
    """Return the lower-cased extension of ``filename`` or ``UNKNOWN_EXTENSION``.

    Suffixes that are not plain alphanumeric tokens (``1.2.3-linux``) or that
    are purely numeric (``v1.2``) are version fragments, not extensions.
    """
    base = filename.rsplit("/", 1)[-1].lower()
    if "." not in base.strip("."):
        return UNKNOWN_EXTENSION
    ext = base.rsplit(".", 1)[1]
    if not ext or not ext.isalnum() or ext.isdigit():
        return UNKNOWN_EXTENSION
    return ext


def _contains_any(haystack: str, needles: Sequence[str]) -> bool:
    return any(n in haystack for n in needles)


def _extension_points(filename: str, extensions: Sequence[str]) -> int:
    ext = detect_extension(filename)
    if ext == UNKNOWN_EXTENSION or ext not in extensions:
        return 0
    if ext in KEY_EXTENSIONS:
        return KEY_EXTENSION_WEIGHT
    return EXTENSION_WEIGHT


def score_name(filename: str, opts: ScoreOptions) -> int:
    lower = filename.lower()
    points = 0
    if opts.os and _contains_any(lower, opts.os):
        points += OS_WEIGHT
    if opts.arch and _contains_any(lower, opts.arch):
        points += ARCH_WEIGHT
    points += _extension_points(lower, opts.extensions)
    if opts.names and _contains_any(lower, opts.names):
        points += NAME_WEIGHT
    return points


def score(names: Sequence[str], opts: ScoreOptions) -> list[ScoredCandidate]:
    """Score every filename, preserving input order."""
    return [ScoredCandidate(key=name, value=score_name(name, opts)) for name in names]
