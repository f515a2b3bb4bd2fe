"""Target platform normalization and default match criteria per platform."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .score import UNKNOWN_EXTENSION, ScoreOptions


@dataclass(frozen=True)
class PlatformTarget:
    os_name: str
    arch: str


OS_ALIASES: dict[str, tuple[str, ...]] = {
    "windows": ("windows", "win64", "win32"),
    "macos": ("macos", "darwin", "osx", "apple"),
    "linux": ("linux",),
    "freebsd": ("freebsd",),
}

ARCH_ALIASES: dict[str, tuple[str, ...]] = {
    "amd64": ("amd64", "x86_64", "x64", "64bit"),
    "arm64": ("arm64", "aarch64"),
    "386": ("386", "i386", "i686", "32bit"),
    "arm": ("armv7", "armv6", "armhf"),
}

ARCHIVE_EXTENSIONS: dict[str, tuple[str, ...]] = {
    "windows": ("zip", "exe", "msi", "gz", "xz", "tar", UNKNOWN_EXTENSION),
    "macos": ("gz", "zip", "xz", "tar", "bz2", "dmg", UNKNOWN_EXTENSION),
    "linux": ("gz", "zip", "xz", "tar", "bz2", "tgz", "appimage", UNKNOWN_EXTENSION),
}

CHECKSUM_EXTENSIONS = ("txt", "sha256", "sha512", "sha256sum", "sha512sum")
CHECKSUM_NAMES = ("checksums", "sha256sums", "sha512sums", "shasums")
SIGNATURE_EXTENSIONS = ("sig", "asc")
KEY_FILE_EXTENSIONS = ("pem", "pub")


def _normalize_os(system: str) -> str:
    s = system.lower()
    if s.startswith("win"):
        return "windows"
    if s.startswith("darwin") or s.startswith("mac") or s == "osx":
        return "macos"
    if s.startswith("freebsd"):
        return "freebsd"
    return "linux"


def _normalize_arch(machine: str) -> str:
    m = machine.lower()
    if m in ("x86_64", "amd64", "x64"):
        return "amd64"
    if m in ("aarch64", "arm64"):
        return "arm64"
    if m in ("i386", "i686", "x86", "386"):
        return "386"
    if m.startswith("armv"):
        return "arm"
    return m


def resolve_target(system: str, machine: str) -> PlatformTarget:
    return PlatformTarget(os_name=_normalize_os(system), arch=_normalize_arch(machine))


def os_tokens(target: PlatformTarget) -> tuple[str, ...]:
    return OS_ALIASES.get(target.os_name, (target.os_name,))


def arch_tokens(target: PlatformTarget) -> tuple[str, ...]:
    return ARCH_ALIASES.get(target.arch, (target.arch,))


def score_options_for(
    target: PlatformTarget,
    names: Iterable[str] = (),
    extensions: Iterable[str] | None = None,
) -> ScoreOptions:
    """Build binary match criteria for ``target`` with alias expansion."""
    if extensions is None:
        extensions = ARCHIVE_EXTENSIONS.get(target.os_name, ARCHIVE_EXTENSIONS["linux"])
    return ScoreOptions(
        os=os_tokens(target),
        arch=arch_tokens(target),
        extensions=tuple(extensions),
        names=tuple(names),
    )


def checksum_options(names: Iterable[str] = ()) -> ScoreOptions:
    return ScoreOptions(extensions=CHECKSUM_EXTENSIONS, names=CHECKSUM_NAMES + tuple(names))


def signature_options(target: PlatformTarget, names: Iterable[str] = ()) -> ScoreOptions:
    return ScoreOptions(
        os=os_tokens(target),
        arch=arch_tokens(target),
        extensions=SIGNATURE_EXTENSIONS,
        names=tuple(names),
    )


def key_options(target: PlatformTarget, names: Iterable[str] = ()) -> ScoreOptions:
    return ScoreOptions(
        os=os_tokens(target),
        arch=arch_tokens(target),
        extensions=KEY_FILE_EXTENSIONS,
        names=tuple(names),
    )
