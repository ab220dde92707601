"""Per-connector reconciliation of category folders and files."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Any

from ..logging_config import get_logger
from ..models import (
    Category,
    FileAdded,
    FileRemoved,
    FolderAdded,
    FolderRemoved,
    ParseFailure,
)
from .differ import StructuralDiffer
from .reader import FileTreeReader, folder_exists, list_files_recursively

logger = get_logger("drift_analyzer.reconciler")


def _stem(file_name: str) -> str:
    return file_name[:-len(".json")] if file_name.endswith(".json") else file_name


class TreeReconciler:
    """Compares one connector's previous and current directories.

    Each category folder is in one of four states: absent on both sides
    (skipped), previous-only (``folder-removed``), current-only
    (``folder-added``) or present on both sides, in which case files are
    matched by name and common files are diffed structurally.
    """

    def __init__(self, expand_folder_changes: bool = False):
        self.expand_folder_changes = expand_folder_changes
        self.previous_reader = FileTreeReader("previous")
        self.current_reader = FileTreeReader("current")

    @property
    def parse_errors(self) -> List[ParseFailure]:
        return self.previous_reader.parse_errors + self.current_reader.parse_errors

    def reconcile(self, prev_connector_path: Path, curr_connector_path: Path) -> List:
        changes: List = []
        for category in Category:
            changes.extend(self.reconcile_category(
                category,
                Path(prev_connector_path) / category.value,
                Path(curr_connector_path) / category.value,
            ))
        return changes

    def reconcile_category(self, category: Category, prev_folder: Path, curr_folder: Path) -> List:
        prev_exists = folder_exists(prev_folder)
        curr_exists = folder_exists(curr_folder)

        if not prev_exists and not curr_exists:
            return []

        if prev_exists and not curr_exists:
            changes: List = [FolderRemoved(category=category)]
            if self.expand_folder_changes:
                changes.extend(
                    FileRemoved(category=category, file_name=rel)
                    for rel in list_files_recursively(prev_folder)
                )
            return changes

        if curr_exists and not prev_exists:
            changes = [FolderAdded(category=category)]
            if self.expand_folder_changes:
                changes.extend(
                    FileAdded(category=category, file_name=rel)
                    for rel in list_files_recursively(curr_folder)
                )
            return changes

        return self._reconcile_files(category, prev_folder, curr_folder)

    def _reconcile_files(self, category: Category, prev_folder: Path, curr_folder: Path) -> List:
        prev_files = self._valid_documents(self.previous_reader, prev_folder, category)
        curr_files = self._valid_documents(self.current_reader, curr_folder, category)

        changes: List = []
        for file_name in sorted(set(prev_files) | set(curr_files)):
            if file_name not in prev_files:
                changes.append(FileAdded(category=category, file_name=file_name))
            elif file_name not in curr_files:
                changes.append(FileRemoved(category=category, file_name=file_name))
            else:
                differ = StructuralDiffer(category, file_name)
                changes.extend(differ.diff(prev_files[file_name], curr_files[file_name], _stem(file_name)))
        return changes

    @staticmethod
    def _valid_documents(reader: FileTreeReader, folder: Path, category: Category) -> Dict[str, Any]:
        documents = reader.collect_json_files(folder, category)
        invalid = [name for name in documents if not reader.is_valid(folder, name)]
        for name in invalid:
            logger.debug(f"Treating unparseable {category.value}/{name} ({reader.side}) as absent")
            del documents[name]
        return documents
