import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))

from distill_core.config import ConfigError, DistillConfig, GitHubConfig, load_config, save_config

_NO_TOKENS = {"GITHUB_TOKEN": "", "DISTILL_GITHUB_TOKEN": "", "GITLAB_TOKEN": "", "DISTILL_GITLAB_TOKEN": ""}


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp, patch.dict(os.environ, _NO_TOKENS):
            cfg = load_config(Path(tmp) / "missing.json")
            self.assertIsInstance(cfg, DistillConfig)
            self.assertFalse(cfg.include_pre_releases)
            self.assertEqual(cfg.github.base_url, "https://api.github.com")
            self.assertEqual(cfg.gitlab.base_url, "https://gitlab.com/api/v4")
            self.assertEqual(cfg.github.token, "")

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp, patch.dict(os.environ, _NO_TOKENS):
            path = Path(tmp) / "config.json"
            cfg = load_config(path)
            cfg.include_pre_releases = True
            cfg.downloads_dir = str(Path(tmp) / "dl")
            cfg.gitlab.base_url = "https://git.example.org/api/v4"
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertTrue(reloaded.include_pre_releases)
            self.assertEqual(reloaded.downloads_path, Path(tmp) / "dl")
            self.assertEqual(reloaded.gitlab.base_url, "https://git.example.org/api/v4")

    def test_corrupt_file_yields_defaults(self):
        with tempfile.TemporaryDirectory() as tmp, patch.dict(os.environ, _NO_TOKENS):
            path = Path(tmp) / "config.json"
            path.write_text("{broken", encoding="utf-8")
            self.assertFalse(load_config(path).include_pre_releases)

    def test_wrong_type_is_rejected(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps({"include_pre_releases": "yes"}), encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_config(path)
        with self.assertRaises(ConfigError):
            GitHubConfig(token=123)  # type: ignore[arg-type]

    def test_env_token_fills_empty_token(self):
        with tempfile.TemporaryDirectory() as tmp:
            env = dict(_NO_TOKENS, GITHUB_TOKEN="gh-env", DISTILL_GITLAB_TOKEN="gl-env")
            with patch.dict(os.environ, env):
                cfg = load_config(Path(tmp) / "missing.json")
            self.assertEqual(cfg.github.token, "gh-env")
            self.assertEqual(cfg.gitlab.token, "gl-env")

    def test_file_token_wins_over_env(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps({"github": {"token": "from-file"}}), encoding="utf-8")
            with patch.dict(os.environ, dict(_NO_TOKENS, GITHUB_TOKEN="gh-env")):
                self.assertEqual(load_config(path).github.token, "from-file")

    def test_base_url_trailing_slash_trimmed(self):
        self.assertEqual(GitHubConfig(base_url="https://ghe.example/api/v3/").base_url, "https://ghe.example/api/v3")


if __name__ == "__main__":
    unittest.main()
