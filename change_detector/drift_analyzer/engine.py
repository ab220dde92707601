"""Top-level change detection over two connector snapshots."""

from __future__ import annotations

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Tuple

from ..config import Config
from ..errors import RootsNotFoundError
from ..logging_config import get_logger
from ..models import ConnectorReport
from .classifier import SeverityClassifier, load_rules
from .reader import list_connectors
from .reconciler import TreeReconciler

logger = get_logger("drift_analyzer.engine")


class ChangeDetectionEngine:
    """Runs reconciliation and classification for every connector.

    Connectors are processed in lexicographic order and reported in that
    order whatever the worker count. A failure inside one connector is
    captured on its report; only missing roots abort the run.
    """

    def __init__(self, classifier: Optional[SeverityClassifier] = None,
                 expand_folder_changes: bool = False, max_workers: int = 1):
        self.classifier = classifier or SeverityClassifier()
        self.expand_folder_changes = expand_folder_changes
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, config: Config) -> "ChangeDetectionEngine":
        rules = load_rules(config.severity_rules_path)
        return cls(
            classifier=SeverityClassifier(rules),
            expand_folder_changes=config.expand_folder_changes,
            max_workers=config.max_workers,
        )

    def run(self, previous_root, current_root) -> List[ConnectorReport]:
        previous_root, current_root = Path(previous_root), Path(current_root)
        connectors = self._collect_connectors(previous_root, current_root)
        start = time.perf_counter()

        if self.max_workers > 1 and len(connectors) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                reports = list(pool.map(
                    lambda name: self.compare_connector(name, previous_root, current_root),
                    connectors,
                ))
        else:
            reports = [self.compare_connector(name, previous_root, current_root) for name in connectors]

        self._log_completion(reports, time.perf_counter() - start)
        return reports

    async def run_async(self, previous_root, current_root) -> List[ConnectorReport]:
        """Same contract as ``run``, reconciling connectors concurrently in worker threads."""
        previous_root, current_root = Path(previous_root), Path(current_root)
        connectors = self._collect_connectors(previous_root, current_root)
        start = time.perf_counter()

        reports = await asyncio.gather(*(
            asyncio.to_thread(self.compare_connector, name, previous_root, current_root)
            for name in connectors
        ))

        self._log_completion(list(reports), time.perf_counter() - start)
        return list(reports)

    def compare_connector(self, connector: str, previous_root: Path, current_root: Path) -> ConnectorReport:
        """Reconcile and classify one connector, capturing any failure on the report."""
        reconciler = TreeReconciler(expand_folder_changes=self.expand_folder_changes)
        try:
            changes = reconciler.reconcile(previous_root / connector, current_root / connector)
            classified = self.classifier.annotate_all(changes)
        except Exception as e:
            logger.exception(f"Failed to process connector {connector}: {e}")
            return ConnectorReport(
                connector=connector,
                changes=[],
                processing_error=str(e) or type(e).__name__,
                parse_errors=reconciler.parse_errors,
            )

        logger.debug(f"Connector {connector}: {len(classified)} changes")
        return ConnectorReport(
            connector=connector,
            changes=classified,
            parse_errors=reconciler.parse_errors,
        )

    def _collect_connectors(self, previous_root: Path, current_root: Path) -> List[str]:
        prev_ok, curr_ok = self._validate_roots(previous_root, current_root)
        logger.info(f"Starting connector comparison: previous={previous_root} current={current_root}")

        names = set()
        if prev_ok:
            names.update(list_connectors(previous_root))
        if curr_ok:
            names.update(list_connectors(current_root))
        return sorted(names)

    @staticmethod
    def _validate_roots(previous_root: Path, current_root: Path) -> Tuple[bool, bool]:
        prev_ok, curr_ok = previous_root.is_dir(), current_root.is_dir()
        if not prev_ok and not curr_ok:
            logger.error(f"Neither connector root exists: {previous_root}, {current_root}")
            raise RootsNotFoundError(previous_root, current_root)
        if not prev_ok:
            logger.warning(f"Previous root not found, treating every connector as new: {previous_root}")
        if not curr_ok:
            logger.warning(f"Current root not found, treating every connector as removed: {current_root}")
        return prev_ok, curr_ok

    @staticmethod
    def _log_completion(reports: List[ConnectorReport], elapsed: float) -> None:
        failed = [r.connector for r in reports if r.processing_error]
        total = sum(len(r.changes) for r in reports)
        logger.info(
            f"✅ Connector comparison complete: {len(reports)} connectors, "
            f"{total} changes, {len(failed)} failed ({elapsed * 1000:.1f}ms)"
        )
        if failed:
            logger.warning(f"Connectors with processing errors: {', '.join(failed)}")
