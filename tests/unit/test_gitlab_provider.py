import json
import sys
import unittest
import urllib.error
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "provider"))

from distill_core.config import DistillConfig, GitLabConfig
from distill_provider.errors import Cancelled, NoAssetsFound, ReleaseNotFound, TransportError
from distill_provider.gitlab import GitLabProvider
from distill_provider.provider import CancelToken
from distill_provider.transport import HttpClient

API = "https://gitlab.com/api/v4/projects/group%2Ftool/releases"


class _FakeResponse:
    def __init__(self, payload):
        self._payload = payload
        self.headers = {}

    def read(self):
        return json.dumps(self._payload).encode("utf-8")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def _opener(routes, seen):
    def _open(request, timeout):
        seen.append(request)
        route = routes.get(request.full_url)
        if route is None:
            raise urllib.error.HTTPError(request.full_url, 404, "Not Found", {}, None)
        if isinstance(route, int):
            raise urllib.error.HTTPError(request.full_url, route, "Error", {}, None)
        return _FakeResponse(route)

    return _open


def _provider(routes, version="latest", config=None):
    seen = []
    provider = GitLabProvider(
        owner="group",
        repo="tool",
        version=version,
        os_name="linux",
        arch="amd64",
        config=config or DistillConfig(downloads_dir="/srv/downloads"),
        client=HttpClient(opener=_opener(routes, seen)),
    )
    return provider, seen


RELEASE = {
    "tag_name": "v0.5.0",
    "name": "0.5.0",
    "upcoming_release": False,
    "assets": {
        "links": [
            {"id": 11, "name": "Linux build", "url": "https://gitlab.com/group/tool/-/releases/v0.5.0/downloads/tool-linux-amd64.tar.gz"},
            {
                "id": 12,
                "name": "Checksums",
                "url": "https://example.com/files/checksums.txt?x=1",
                "direct_asset_url": "https://gitlab.com/group/tool/-/releases/v0.5.0/downloads/checksums.txt",
            },
        ]
    },
}


class GitLabProviderTests(unittest.TestCase):
    def test_identity_accessors(self):
        provider, _ = _provider({})
        self.assertEqual(provider.source, "gitlab")
        self.assertEqual(provider.app, "group/tool")
        self.assertEqual(provider.cache_id, "gitlab-group-tool-linux-amd64")

    def test_latest_release(self):
        provider, seen = _provider({f"{API}/permalink/latest": RELEASE})
        release = provider.resolve_release()
        self.assertEqual(release.tag, "v0.5.0")
        self.assertFalse(release.prerelease)
        self.assertEqual(provider.version, "0.5.0")
        self.assertEqual(provider.downloads_dir, Path("/srv/downloads/gitlab/group/tool/0.5.0"))
        self.assertEqual(len(seen), 1)

    def test_explicit_version_uses_tag_lookup(self):
        provider, seen = _provider({f"{API}/v0.5.0": RELEASE}, version="v0.5.0")
        release = provider.resolve_release()
        self.assertEqual(release.release_id, "v0.5.0")
        self.assertEqual(seen[0].full_url, f"{API}/v0.5.0")

    def test_explicit_version_missing_fails_without_listing(self):
        provider, seen = _provider({}, version="v9.9.9")
        with self.assertRaises(ReleaseNotFound):
            provider.resolve_release()
        self.assertEqual(len(seen), 1)

    def test_latest_missing_is_not_found(self):
        provider, _ = _provider({})
        with self.assertRaises(ReleaseNotFound):
            provider.resolve_release()

    def test_server_error_propagates(self):
        provider, _ = _provider({f"{API}/permalink/latest": 502})
        with self.assertRaises(TransportError):
            provider.resolve_release()

    def test_enumerate_assets_from_links(self):
        provider, seen = _provider({f"{API}/permalink/latest": RELEASE})
        release = provider.resolve_release()
        assets = provider.enumerate_assets(release)
        self.assertEqual([a.name for a in assets], ["tool-linux-amd64.tar.gz", "checksums.txt"])
        self.assertTrue(assets[1].url.startswith("https://gitlab.com/"))
        self.assertEqual(assets[0].asset_id, 11)
        self.assertEqual(len(seen), 1)

    def test_empty_links_raise(self):
        payload = dict(RELEASE, assets={"links": []})
        provider, _ = _provider({f"{API}/permalink/latest": payload})
        release = provider.resolve_release()
        with self.assertRaises(NoAssetsFound):
            provider.enumerate_assets(release)

    def test_upcoming_release_is_prerelease(self):
        payload = dict(RELEASE, upcoming_release=True)
        provider, _ = _provider({f"{API}/permalink/latest": payload})
        self.assertTrue(provider.resolve_release().prerelease)

    def test_self_managed_base_url(self):
        cfg = DistillConfig(gitlab=GitLabConfig(base_url="https://git.example.org/api/v4/"))
        provider, seen = _provider({}, config=cfg)
        with self.assertRaises(ReleaseNotFound):
            provider.resolve_release()
        self.assertTrue(seen[0].full_url.startswith("https://git.example.org/api/v4/projects/group%2Ftool/"))

    def test_cancelled(self):
        provider, seen = _provider({f"{API}/permalink/latest": RELEASE})
        cancel = CancelToken()
        cancel.cancel()
        with self.assertRaises(Cancelled):
            provider.resolve_release(cancel)
        self.assertEqual(seen, [])


if __name__ == "__main__":
    unittest.main()
