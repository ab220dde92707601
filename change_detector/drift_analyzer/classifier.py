"""Keyword-based severity classification of change records."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import RuleConfigError
from ..logging_config import get_logger
from ..models import Category, Severity

logger = get_logger("drift_analyzer.classifier")


class SeverityRule(BaseModel):
    """A substring pattern and the severity it assigns."""
    model_config = ConfigDict(frozen=True)

    pattern: str = Field(..., min_length=1, description="Case-sensitive substring to look for")
    severity: Severity = Field(..., description="Severity assigned when the pattern matches")

    @field_validator("severity", mode="before")
    @classmethod
    def parse_severity(cls, v):
        return v if isinstance(v, Severity) else Severity.parse(v)


def _rules(severity: Severity, *patterns: str) -> Tuple[SeverityRule, ...]:
    return tuple(SeverityRule(pattern=p, severity=severity) for p in patterns)


# Evaluated in order, first match wins
DEFAULT_RULES: Tuple[SeverityRule, ...] = (
    _rules(Severity.CRITICAL, "auth/", "security", "permissions", "authentication", "authorization")
    + _rules(
        Severity.MAJOR,
        "actions/", "events/",
        "file-added", "file-removed", "folder-added", "folder-removed",
        "endpoint", "httpMethod", "inputFields", "outputFields", "trigger", "payload",
    )
)

DEFAULT_CRITICAL_CATEGORIES = frozenset({Category.AUTH})


def _haystacks(change: Any) -> List[str]:
    fields = [
        getattr(change, "path", None),
        change.location,
        change.file_ref,
        change.category.value,
        change.kind,
    ]
    return [f for f in fields if f]


class SeverityClassifier:
    """Assigns exactly one severity to a change.

    Changes in a critical category are Critical regardless of the rule
    table. Otherwise the first rule whose pattern occurs in the change's
    path, location, file name, category or kind wins; ``modified`` changes
    are also matched against string old/new values. Unmatched changes are
    Minor.
    """

    def __init__(self, rules: Iterable[SeverityRule] = DEFAULT_RULES,
                 critical_categories: Iterable[Category] = DEFAULT_CRITICAL_CATEGORIES,
                 default: Severity = Severity.MINOR):
        self.rules: Tuple[SeverityRule, ...] = tuple(rules)
        self.critical_categories = frozenset(critical_categories)
        self.default = default

    def classify(self, change: Any) -> Severity:
        if change.category in self.critical_categories:
            return Severity.CRITICAL

        haystacks = _haystacks(change)
        values: List[str] = []
        if change.kind == "modified":
            values = [v for v in (change.old_value, change.new_value) if isinstance(v, str)]

        for rule in self.rules:
            if any(rule.pattern in text for text in haystacks):
                return rule.severity
            if any(rule.pattern in text for text in values):
                return rule.severity
        return self.default

    def annotate(self, change: Any) -> Any:
        """Copy of ``change`` with its severity set."""
        return change.model_copy(update={"severity": self.classify(change)})

    def annotate_all(self, changes: Iterable[Any]) -> List[Any]:
        return [self.annotate(c) for c in changes]


def load_rules(path: Optional[Path]) -> Tuple[SeverityRule, ...]:
    """Load a rule table from YAML, falling back to the defaults if the file is missing.

    Expected layout::

        rules:
          - pattern: security
            severity: critical
    """
    if not path or not path.exists():
        if path:
            logger.warning(f"Severity rules file not found, using defaults: {path}")
        return DEFAULT_RULES

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise RuleConfigError(f"Could not read severity rules from {path}: {e}") from e

    entries = raw.get("rules") if isinstance(raw, dict) else None
    if not isinstance(entries, list) or not entries:
        raise RuleConfigError(f"{path} must define a non-empty 'rules' list")

    try:
        rules = tuple(SeverityRule.model_validate(entry) for entry in entries)
    except (ValidationError, ValueError) as e:
        raise RuleConfigError(f"Invalid severity rule in {path}: {e}") from e

    logger.info(f"Loaded {len(rules)} severity rules from {path}")
    return rules
