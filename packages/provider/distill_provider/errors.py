"""Error kinds surfaced by release resolution."""

from __future__ import annotations


class DistillError(RuntimeError):
    kind = "error"


class ReleaseNotFound(DistillError):
    kind = "release_not_found"


class NoAssetsFound(DistillError):
    kind = "no_assets_found"


class Cancelled(DistillError):
    kind = "cancelled"


class TransportError(DistillError):
    kind = "transport_error"

    def __init__(self, message: str, url: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status

    @property
    def not_found(self) -> bool:
        return self.status == 404
