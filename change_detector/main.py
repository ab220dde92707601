#!/usr/bin/env python3
"""
Connector Change Detector - command-line entry point

Compares a previous and a current connector snapshot and prints the
classified change reports, plus a summary, as JSON on stdout.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .config import Config
from .drift_analyzer import ChangeDetectionEngine, summarize
from .errors import ChangeDetectionError
from .logging_config import get_logger, setup_logging

logger = get_logger("main")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Detect functional changes between two connector snapshots.")
    ap.add_argument("--previous", default=None, help="Previous snapshot root (env CONNECTORS_PREVIOUS)")
    ap.add_argument("--current", default=None, help="Current snapshot root (env CONNECTORS_CURRENT)")
    ap.add_argument("--rules", default=None, help="Optional severity rules YAML (env SEVERITY_RULES_PATH)")
    ap.add_argument("--expand-folders", action="store_true", default=None,
                    help="Also list every file of an added or removed category folder")
    ap.add_argument("--workers", type=int, default=None, help="Connectors compared in parallel (env MAX_WORKERS)")
    ap.add_argument("--log-level", default=None, help="Logging level (env LOG_LEVEL)")
    return ap


def load_config(args: argparse.Namespace) -> Config:
    config = Config()
    if args.previous:
        config.previous_root = Path(args.previous)
    if args.current:
        config.current_root = Path(args.current)
    if args.rules:
        config.severity_rules_path = Path(args.rules)
    if args.expand_folders:
        config.expand_folder_changes = True
    if args.workers is not None:
        config.max_workers = args.workers
    if args.log_level:
        config.log_level = args.log_level
    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_level)

    try:
        engine = ChangeDetectionEngine.from_config(config)
        reports = engine.run(config.previous_root, config.current_root)
    except ChangeDetectionError as e:
        logger.error(f"Change detection failed: {e}")
        return 1

    output = {
        "reports": [r.model_dump(mode="json") for r in reports],
        "summary": summarize(reports).model_dump(mode="json"),
    }
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
