import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "provider"))
sys.path.insert(0, str(ROOT / "installers" / "bootstrap"))

from distill_bootstrap.resolver import AssetSelectionError, discover, rank
from distill_core.score import ScoreOptions
from distill_core.targets import resolve_target
from distill_provider.models import Asset


def _assets(*names):
    return [Asset(name=n, url=f"https://example/{n}", source="github") for n in names]


class RankTests(unittest.TestCase):
    def test_rank_orders_by_score_and_keeps_ties_stable(self):
        assets = _assets("a-linux.zip", "b-linux-amd64.zip", "c-linux.zip")
        ranked = rank(assets, ScoreOptions(os=["linux"], arch=["amd64"], extensions=["zip"]))
        self.assertEqual([r.asset.name for r in ranked], ["b-linux-amd64.zip", "a-linux.zip", "c-linux.zip"])
        self.assertEqual([r.score for r in ranked], [90, 55, 55])


class DiscoverTests(unittest.TestCase):
    def test_discover_binary_and_companions(self):
        assets = _assets(
            "checksums.txt",
            "tool_1.0.0_darwin_arm64.tar.gz",
            "tool_1.0.0_linux_amd64.tar.gz",
            "tool_1.0.0_linux_amd64.tar.gz.sig",
            "tool_1.0.0_linux_arm64.tar.gz.sig",
            "cosign.pub",
            "tool_1.0.0_windows_amd64.zip",
        )
        found = discover(assets, resolve_target("Linux", "x86_64"), names=["tool"])
        self.assertEqual(found.binary.asset.name, "tool_1.0.0_linux_amd64.tar.gz")
        self.assertEqual(found.binary.score, 100)
        self.assertEqual(found.checksum.asset.name, "checksums.txt")
        self.assertEqual(found.signature.asset.name, "tool_1.0.0_linux_amd64.tar.gz.sig")
        self.assertEqual(found.key.asset.name, "cosign.pub")
        self.assertNotIn("checksums.txt", [c.asset.name for c in found.candidates])

    def test_discover_without_companions(self):
        found = discover(_assets("tool-windows-amd64.exe", "tool-linux-amd64"), resolve_target("Windows", "AMD64"))
        self.assertEqual(found.binary.asset.name, "tool-windows-amd64.exe")
        self.assertIsNone(found.checksum)
        self.assertIsNone(found.signature)
        self.assertIsNone(found.key)

    def test_plain_text_files_are_not_checksums(self):
        assets = _assets("LICENSE.txt", "README.txt", "tool-linux-amd64.tar.gz")
        found = discover(assets, resolve_target("Linux", "x86_64"), names=["tool"])
        self.assertEqual(found.binary.asset.name, "tool-linux-amd64.tar.gz")
        self.assertIsNone(found.checksum)
        self.assertEqual([c.asset.name for c in found.candidates], ["tool-linux-amd64.tar.gz"])

    def test_sha_extension_is_a_checksum(self):
        assets = _assets("tool-linux-amd64.tar.gz", "NOTES.txt", "tool-linux-amd64.tar.gz.sha256")
        found = discover(assets, resolve_target("Linux", "x86_64"), names=["tool"])
        self.assertEqual(found.checksum.asset.name, "tool-linux-amd64.tar.gz.sha256")

    def test_discover_raises_when_nothing_matches(self):
        with self.assertRaises(AssetSelectionError):
            discover(_assets("README.md", "checksums.txt"), resolve_target("Linux", "x86_64"))


if __name__ == "__main__":
    unittest.main()
