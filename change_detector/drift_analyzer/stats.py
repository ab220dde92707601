"""Aggregate statistics over connector reports."""

from typing import Iterable

from ..models import ChangeSummary, ConnectorReport, CountSummary, Severity


def summarize(reports: Iterable[ConnectorReport]) -> ChangeSummary:
    """Count changes by severity, kind, category and connector."""
    summary = ChangeSummary()

    for report in reports:
        per_connector = summary.connectors.setdefault(report.connector, CountSummary())
        if report.processing_error:
            summary.failed_connectors.append(report.connector)

        for change in report.changes:
            severity = (change.severity or Severity.MINOR).value
            per_category = summary.by_category.setdefault(change.category.value, CountSummary())

            summary.total_changes += 1
            summary.by_severity[severity] += 1
            summary.by_kind[change.kind] += 1
            for bucket in (per_connector, per_category):
                bucket.total += 1
                bucket.by_severity[severity] += 1

    return summary
