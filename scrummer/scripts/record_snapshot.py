#!/usr/bin/env python3
"""
Record a sprint health snapshot from the stored setup.

Usage:
    python -m scrummer.scripts.record_snapshot [--force] [--new-sprint] [--show N] [--db PATH]
"""

import argparse

from scrummer.core.config import settings
from scrummer.core.logging_config import setup_logging
from scrummer.services.history_store import HistoryStore
from scrummer.services.setup_store import SetupStore
from scrummer.services.signal_engine import SignalEngine
from scrummer.services.storage import KeyValueStore


def log(msg: str) -> None:
    """Unbuffered output for real-time logging."""
    print(msg, flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute sprint signals and record a history snapshot")
    parser.add_argument("--db", default=settings.db_path, help="Path to the SQLite store")
    parser.add_argument("--force", action="store_true", help="Save even if the last snapshot is recent")
    parser.add_argument("--new-sprint", action="store_true", help="Start a new sprint id before saving")
    parser.add_argument("--show", type=int, default=5, help="Number of recent snapshots to print (default: 5)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(settings.log_level)

    storage = KeyValueStore(args.db, timeout=settings.db_timeout)
    storage.init()

    history = HistoryStore(
        storage,
        limit=settings.history_limit,
        dedup_window_ms=settings.dedup_window_seconds * 1000,
    )
    if args.new_sprint:
        log(f"Started sprint {history.reset_current_sprint()}")

    signals = SignalEngine().compute(SetupStore(storage).load())
    log(
        f"Risk {signals.risk_score} ({signals.risk_band.value}), "
        f"confidence {signals.confidence}%, capacity {signals.capacity_sp:.1f} SP"
    )

    result = history.save_snapshot(signals, force=args.force)
    if result.ok:
        log(f"Saved snapshot for {result.snapshot.sprint_id}")
    else:
        log("Skipped: last snapshot is inside the duplicate window (use --force)")

    for snap in history.get_history()[-args.show:] if args.show > 0 else []:
        log(
            f"  {snap.sprint_id}  {snap.mode.value:<7} risk={snap.risk_score:g} "
            f"conf={snap.confidence:g} committed={snap.committed_sp:g} capacity={snap.capacity_sp:.1f}"
        )

    stats = storage.get_stats()
    log(f"\nStore stats: {stats['entry_count']} keys, {stats['total_bytes']:,} bytes")
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
