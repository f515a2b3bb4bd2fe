"""HTTP client for hosting provider APIs with TLS handling and a disk ETag cache."""

from __future__ import annotations

import json
import os
import re
import ssl
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path
from typing import Any, Callable, Mapping

import certifi

from distill_core.logging_setup import get_logger

from .errors import Cancelled, TransportError
from .provider import CancelToken

logger = get_logger("transport")

USER_AGENT = "distill/0.1 (+https://github.com/distill-dev/distill)"

Opener = Callable[[urllib.request.Request, float], Any]

_LINK_RE = re.compile(r'<([^>]+)>\s*;\s*rel="?([^",]+)"?')


def _build_ssl_context() -> ssl.SSLContext:
    """Create TLS context for API calls with explicit CA handling."""
    if os.environ.get("DISTILL_ALLOW_INSECURE_TLS", "").strip() == "1":
        return ssl._create_unverified_context()

    ca_bundle = os.environ.get("DISTILL_CA_BUNDLE", "").strip()
    if ca_bundle:
        return ssl.create_default_context(cafile=ca_bundle)

    return ssl.create_default_context(cafile=certifi.where())


def _urlopen(request: urllib.request.Request, timeout: float):
    return urllib.request.urlopen(request, timeout=timeout, context=_build_ssl_context())


class NullCache:
    def get(self, url: str) -> dict[str, Any] | None:
        return None

    def put(self, url: str, etag: str, body: str, headers: Mapping[str, str] | None = None) -> None:
        return None


class DiskCache:
    """JSON file of ``url -> {etag, body, headers}`` entries for one cache partition."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._entries: dict[str, dict[str, Any]] | None = None

    def _load(self) -> dict[str, dict[str, Any]]:
        if self._entries is None:
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                data = {}
            self._entries = data if isinstance(data, dict) else {}
        return self._entries

    def get(self, url: str) -> dict[str, Any] | None:
        entry = self._load().get(url)
        if isinstance(entry, dict) and entry.get("etag") and "body" in entry:
            return entry
        return None

    def put(self, url: str, etag: str, body: str, headers: Mapping[str, str] | None = None) -> None:
        entries = self._load()
        entries[url] = {"etag": etag, "body": body, "headers": dict(headers or {})}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(entries), encoding="utf-8")
        os.replace(tmp, self.path)


def next_page(headers: Mapping[str, str]) -> int | None:
    """Return the ``page`` number of the ``rel="next"`` link, if any."""
    link = headers.get("Link") or headers.get("link") or ""
    for url, rel in _LINK_RE.findall(link):
        if rel != "next":
            continue
        query = urllib.parse.parse_qs(urllib.parse.urlparse(url).query)
        pages = query.get("page")
        if pages and pages[0].isdigit():
            return int(pages[0])
    return None


class HttpClient:
    def __init__(
        self,
        token: str = "",
        cache: DiskCache | NullCache | None = None,
        opener: Opener | None = None,
        timeout: float = 30,
    ) -> None:
        self.token = token
        self.cache = cache or NullCache()
        self.opener = opener or _urlopen
        self.timeout = timeout

    def _request(self, url: str, etag: str | None) -> urllib.request.Request:
        request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT, "Accept": "application/json"})
        if self.token:
            request.add_header("Authorization", f"Bearer {self.token}")
        if etag:
            request.add_header("If-None-Match", etag)
        return request

    def get_json(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
        cancel: CancelToken | None = None,
    ) -> tuple[Any, dict[str, str]]:
        if params:
            url = f"{url}?{urllib.parse.urlencode(params)}"
        if cancel is not None:
            cancel.raise_if_cancelled()

        cached = self.cache.get(url)
        request = self._request(url, cached["etag"] if cached else None)
        logger.debug(f"GET {url}", extra={"event": "http_get"})

        try:
            with self.opener(request, self.timeout) as response:
                body = response.read().decode("utf-8")
                headers = dict(response.headers.items())
        except urllib.error.HTTPError as exc:
            if cancel is not None:
                cancel.raise_if_cancelled()
            if exc.code == 304 and cached:
                logger.debug(f"cache hit {url}", extra={"event": "http_cache_hit"})
                # a 304 may omit Link, so the stored headers are the base
                merged = dict(cached.get("headers") or {})
                if exc.headers:
                    merged.update(exc.headers.items())
                return self._decode(url, cached["body"]), merged
            raise TransportError(f"{exc.code} {exc.reason} for {url}", url=url, status=exc.code) from exc
        except (urllib.error.URLError, OSError) as exc:
            if cancel is not None:
                cancel.raise_if_cancelled()
            raise TransportError(f"request failed for {url}: {exc}", url=url) from exc

        if cancel is not None and cancel.cancelled:
            raise Cancelled(f"operation cancelled after GET {url}")

        payload = self._decode(url, body)
        etag = headers.get("ETag") or headers.get("etag")
        if etag:
            self.cache.put(url, etag, body, headers)
        return payload, headers

    @staticmethod
    def _decode(url: str, body: str) -> Any:
        try:
            return json.loads(body)
        except ValueError as exc:
            raise TransportError(f"invalid JSON from {url}", url=url) from exc


def build_client(cache_file: Path | None, token: str = "", opener: Opener | None = None) -> HttpClient:
    cache = DiskCache(cache_file) if cache_file is not None else NullCache()
    return HttpClient(token=token, cache=cache, opener=opener)
