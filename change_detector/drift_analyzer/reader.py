"""Reading connector snapshots from disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from ..logging_config import get_logger
from ..models import Category, ParseFailure

logger = get_logger("drift_analyzer.reader")

JSON_SUFFIX = ".json"


def folder_exists(path: Path) -> bool:
    return path.is_dir()


def list_connectors(root: Path) -> List[str]:
    """Names of the connector directories directly under ``root``, sorted."""
    if not root.is_dir():
        return []
    return sorted(p.name for p in root.iterdir() if p.is_dir())


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def load_json(path: Path) -> Any:
    """Parse one UTF-8 document; NaN and Infinity are rejected as in strict JSON."""
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh, parse_constant=_reject_constant)


def list_files_recursively(folder: Path) -> Iterator[str]:
    """Yield ``*.json`` paths under ``folder`` relative to it, lazily and in sorted order."""
    if not folder.is_dir():
        return
    for entry in sorted(folder.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            for rel in list_files_recursively(entry):
                yield f"{entry.name}/{rel}"
        elif entry.is_file() and entry.name.endswith(JSON_SUFFIX):
            yield entry.name


class FileTreeReader:
    """Collects parsed JSON documents from category folders.

    Unreadable or invalid files never raise: they map to ``None`` and are
    recorded in ``parse_errors`` so the caller can treat them as absent.
    """

    def __init__(self, side: str):
        self.side = side
        self.parse_errors: List[ParseFailure] = []
        self._failed: Dict[Path, str] = {}

    def collect_json_files(self, folder: Path, category: Optional[Category] = None) -> Dict[str, Any]:
        """Map each ``*.json`` file directly inside ``folder`` to its content."""
        if not folder.is_dir():
            return {}

        documents: Dict[str, Any] = {}
        for entry in sorted(folder.iterdir(), key=lambda p: p.name):
            if not (entry.is_file() and entry.name.endswith(JSON_SUFFIX)):
                continue
            try:
                documents[entry.name] = load_json(entry)
            except (OSError, ValueError, RecursionError) as e:
                logger.warning(f"Error parsing {entry}: {e}")
                documents[entry.name] = None
                self._failed[entry] = str(e)
                if category is not None:
                    self.parse_errors.append(ParseFailure(
                        category=category,
                        file_name=entry.name,
                        side=self.side,
                        message=str(e),
                    ))
        return documents

    def is_valid(self, folder: Path, file_name: str) -> bool:
        """False when ``folder/file_name`` failed to load in a previous collect call."""
        return (folder / file_name) not in self._failed
