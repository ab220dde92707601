"""
Drift Analyzer Module
Detects and classifies functional changes between two connector snapshots.
"""

from .reader import (
    FileTreeReader,
    folder_exists,
    list_connectors,
    list_files_recursively,
    load_json,
)
from .differ import StructuralDiffer, diff_documents, json_type
from .reconciler import TreeReconciler
from .classifier import (
    DEFAULT_RULES,
    SeverityClassifier,
    SeverityRule,
    load_rules,
)
from .engine import ChangeDetectionEngine
from .stats import summarize

__all__ = [
    'FileTreeReader',
    'folder_exists',
    'list_connectors',
    'list_files_recursively',
    'load_json',
    'StructuralDiffer',
    'diff_documents',
    'json_type',
    'TreeReconciler',
    'DEFAULT_RULES',
    'SeverityClassifier',
    'SeverityRule',
    'load_rules',
    'ChangeDetectionEngine',
    'summarize',
]
