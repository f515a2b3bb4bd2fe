"""CLI that resolves a project's release and ranks its assets for a platform."""

from __future__ import annotations

import argparse
import json
import logging
import signal
from dataclasses import replace
from pathlib import Path

from distill_core.config import ConfigError, load_config
from distill_core.logging_setup import configure_logging
from distill_core.targets import resolve_target
from distill_provider.errors import DistillError
from distill_provider.provider import VERSION_LATEST, CancelToken
from distill_provider.registry import PROVIDERS, parse_app_ref

from .resolver import RankedAsset
from .service import ResolutionResult, host_target, resolve_app


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _ranked(item: RankedAsset | None) -> dict | None:
    if item is None:
        return None
    return {"name": item.asset.name, "url": item.asset.url, "score": item.score}


def result_payload(result: ResolutionResult) -> dict:
    found = result.discovery
    return {
        "app": result.app,
        "source": result.source,
        "target_os": result.target.os_name,
        "target_arch": result.target.arch,
        "tag": result.release.tag,
        "version": result.version,
        "prerelease": result.release.prerelease,
        "downloads_dir": str(result.downloads_dir),
        "binary": _ranked(found.binary),
        "checksum": _ranked(found.checksum),
        "signature": _ranked(found.signature),
        "key": _ranked(found.key),
        "candidates": [_ranked(c) for c in found.candidates],
    }


def cmd_resolve(args: argparse.Namespace) -> int:
    try:
        cfg = load_config(Path(args.config).expanduser() if args.config else None)
        ref = parse_app_ref(args.app, default_source=args.source)
    except (ConfigError, ValueError) as exc:
        _print_json({"error": "invalid_argument", "app": args.app, "message": str(exc)})
        return 1

    if args.version:
        ref = replace(ref, version=args.version)
    if args.pre_releases:
        cfg.include_pre_releases = True
    if args.base_url:
        getattr(cfg, ref.source).base_url = args.base_url.rstrip("/")

    host = host_target()
    target = resolve_target(args.os or host.os_name, args.arch or host.arch)

    cancel = CancelToken()
    previous = signal.signal(signal.SIGINT, lambda _sig, _frame: cancel.cancel())
    try:
        result = resolve_app(ref, cfg, target=target, cancel=cancel)
    except DistillError as exc:
        _print_json({"error": exc.kind, "app": f"{ref.owner}/{ref.repo}", "message": str(exc)})
        return 1
    finally:
        signal.signal(signal.SIGINT, previous)

    _print_json(result_payload(result))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="distill", description="Resolve release artifacts for a platform")
    parser.add_argument("--verbose", action="store_true", help="Log to the console")
    sub = parser.add_subparsers(dest="command", required=True)

    resolve_cmd = sub.add_parser("resolve", help="Resolve a release and rank its assets")
    resolve_cmd.add_argument("app", help="[source/]owner/repo[@version]")
    resolve_cmd.add_argument("--source", choices=sorted(PROVIDERS), default="github")
    resolve_cmd.add_argument("--version", default=None, help=f"Release tag or '{VERSION_LATEST}'")
    resolve_cmd.add_argument("--os", default=None, help="Target operating system (default: host)")
    resolve_cmd.add_argument("--arch", default=None, help="Target architecture (default: host)")
    resolve_cmd.add_argument("--pre-releases", action="store_true", help="Accept pre-releases")
    resolve_cmd.add_argument("--base-url", default=None, help="API base URL for self-hosted instances")
    resolve_cmd.add_argument("--config", default=None, help="Path to config.json")
    resolve_cmd.set_defaults(func=cmd_resolve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(console=args.verbose, level=logging.DEBUG if args.verbose else logging.INFO)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
