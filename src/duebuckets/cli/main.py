#!/usr/bin/env python3
"""Entry point for the duebuckets CLI."""

from __future__ import annotations

import argparse
import json
import signal
import sys
from pathlib import Path
from typing import Any

from duebuckets import __version__
from duebuckets.adapters.board import build_board_client
from duebuckets.app.reconcile import (
    PeriodicTrigger,
    ReconcileError,
    Reconciler,
    check_list_mapping,
)
from duebuckets.domain.buckets import Bucket, CardAction, ReconciliationResult
from duebuckets.logconfig import configure_logging
from duebuckets.ports.board import BoardClient, TransportError
from duebuckets.settings import Settings, SettingsError, load_settings


def _load(args: argparse.Namespace) -> Settings | None:
    raw_config = getattr(args, "config", None)
    try:
        settings = load_settings(Path(raw_config) if raw_config else None)
    except SettingsError as exc:
        print(f"config.invalid: {exc}", file=sys.stderr)
        return None
    configure_logging(getattr(args, "log_level", None) or settings.log_level)
    return settings


def _build_client(settings: Settings) -> BoardClient | None:
    try:
        return build_board_client(settings.board)
    except (SettingsError, TransportError) as exc:
        print(f"config.invalid: {exc}", file=sys.stderr)
        return None


def _run_cmd(args: argparse.Namespace) -> int:
    settings = _load(args)
    if settings is None:
        return 1
    client = _build_client(settings)
    if client is None:
        return 1

    reconciler = Reconciler.from_settings(settings, client)
    try:
        result = reconciler.run()
    except ReconcileError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    _print_result(result, as_json=getattr(args, "json", False))
    return 0


def _watch_cmd(args: argparse.Namespace) -> int:
    settings = _load(args)
    if settings is None:
        return 1
    client = _build_client(settings)
    if client is None:
        return 1

    interval = args.interval if getattr(args, "interval", None) is not None else settings.interval_seconds
    if interval <= 0:
        print("--interval must be positive", file=sys.stderr)
        return 1
    as_json = getattr(args, "json", False)
    trigger = PeriodicTrigger(
        Reconciler.from_settings(settings, client),
        interval,
        on_result=lambda result: _print_result(result, as_json=as_json),
        on_error=lambda exc: print(str(exc), file=sys.stderr),
    )

    def _handle_signal(signum: int, frame: Any) -> None:
        trigger.stop()

    previous = {sig: signal.signal(sig, _handle_signal) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        trigger.run_forever(max_iterations=getattr(args, "max_iterations", 0))
    except KeyboardInterrupt:
        trigger.stop()
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    if trigger.stopped:
        print("duebuckets watch interrupted")
    return 0


def _lists_cmd(args: argparse.Namespace) -> int:
    settings = _load(args)
    if settings is None:
        return 1
    client = _build_client(settings)
    if client is None:
        return 1

    try:
        report = check_list_mapping(client, settings.list_mapping)
    except TransportError as exc:
        print(f"lists.fetch_failed: {exc}", file=sys.stderr)
        return 1

    if getattr(args, "json", False):
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
        return 0 if report.ok else 1

    print("Available lists:")
    for entry in report.lists:
        print(f"  - {entry.id}  {entry.name}")
    print("Mapping:")
    names = {entry.id: entry.name for entry in report.lists}
    for bucket in Bucket:
        list_id = report.mapping.target_for(bucket)
        if list_id is None:
            print(f"  {bucket.value}: (not configured)")
        elif bucket in report.unknown:
            print(f"  {bucket.value}: {list_id} (not on board)")
        else:
            print(f"  {bucket.value}: {list_id} ({names.get(list_id, '')})")
    return 0 if report.ok else 1


def _print_result(result: ReconciliationResult, *, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    print(
        "Reconcile: moved={moved} skipped={skipped} failed={failed} unchanged={unchanged}".format(
            **result.summary()
        )
    )
    if result.cancelled:
        print("Run cancelled before all cards were processed")
    for outcome in result.outcomes:
        if outcome.action == CardAction.UNCHANGED:
            continue
        line = f"  - {outcome.action.value}: {outcome.name or outcome.card_id} -> {outcome.bucket.value}"
        if outcome.error:
            line += f" ({outcome.error})"
        print(line)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="duebuckets",
        description="Move task board cards into the list matching their due date",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        help="Settings file (default: $DUEBUCKETS_CONFIG or config/duebuckets.yaml)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override logging.level from settings",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run a single reconciliation pass")
    run_cmd.add_argument("--json", action="store_true", help="Emit machine-readable result")
    run_cmd.set_defaults(func=_run_cmd)

    watch_cmd = sub.add_parser("watch", help="Reconcile on a fixed interval")
    watch_cmd.add_argument(
        "--interval",
        type=float,
        help="Seconds between runs (default: reconcile.interval_seconds, 3600)",
    )
    watch_cmd.add_argument(
        "--max-iterations",
        type=int,
        default=0,
        help="Stop after N runs (0 = run until interrupted)",
    )
    watch_cmd.add_argument("--json", action="store_true", help="Emit machine-readable result per run")
    watch_cmd.set_defaults(func=_watch_cmd)

    lists_cmd = sub.add_parser("lists", help="Show board lists and check the bucket mapping")
    lists_cmd.add_argument("--json", action="store_true", help="Emit machine-readable report")
    lists_cmd.set_defaults(func=_lists_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
