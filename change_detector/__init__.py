"""Functional change detection for versioned connector definitions."""

from .drift_analyzer import ChangeDetectionEngine, SeverityClassifier, summarize
from .models import Category, ConnectorReport, Severity

__version__ = "2.0.0"

__all__ = [
    'ChangeDetectionEngine',
    'SeverityClassifier',
    'summarize',
    'Category',
    'ConnectorReport',
    'Severity',
]
