"""Shared data models for the connector change detector."""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """Fixed category folders inside a connector, in traversal order."""
    ACTIONS = "actions"
    AUTH = "auth"
    EVENTS = "events"
    META = "meta"
    METADATA = "metadata"


class Severity(str, Enum):
    """Priority assigned to a change. P0 outranks P1 outranks P2."""
    CRITICAL = "P0"
    MAJOR = "P1"
    MINOR = "P2"

    @property
    def label(self) -> str:
        return _SEVERITY_LABELS[self]

    @classmethod
    def parse(cls, raw: str) -> "Severity":
        """Accept a priority code (``P0``) or a label (``critical``)."""
        text = str(raw).strip()
        for severity in cls:
            if text.upper() == severity.value or text.lower() == severity.label.lower():
                return severity
        raise ValueError(f"Unknown severity: {raw!r}")


_SEVERITY_LABELS = {
    Severity.CRITICAL: "Critical",
    Severity.MAJOR: "Major",
    Severity.MINOR: "Minor",
}


# Change Models
class BaseChange(BaseModel):
    """Fields common to every change record."""
    model_config = ConfigDict(frozen=True)

    category: Category = Field(..., description="Category folder the change belongs to")
    severity: Optional[Severity] = Field(None, description="Set once the change is classified")

    @property
    def location(self) -> str:
        """``category/...`` string used for rule matching."""
        return f"{self.category.value}/"

    @property
    def file_ref(self) -> Optional[str]:
        return None


class FolderAdded(BaseChange):
    kind: Literal["folder-added"] = "folder-added"


class FolderRemoved(BaseChange):
    kind: Literal["folder-removed"] = "folder-removed"


class _FileChange(BaseChange):
    file_name: str = Field(..., description="File name relative to the category folder")

    @property
    def location(self) -> str:
        return f"{self.category.value}/{self.file_name}"

    @property
    def file_ref(self) -> Optional[str]:
        return self.file_name


class FileAdded(_FileChange):
    kind: Literal["file-added"] = "file-added"


class FileRemoved(_FileChange):
    kind: Literal["file-removed"] = "file-removed"


class _KeyChange(_FileChange):
    path: str = Field(..., description="Dotted key path rooted at the file base name")

    @property
    def location(self) -> str:
        return f"{self.category.value}/{self.path}"

    @property
    def key(self) -> str:
        """Dotted path relative to the document root, empty for the root itself."""
        stem = self.file_name.rsplit("/", 1)[-1]
        if stem.endswith(".json"):
            stem = stem[:-len(".json")]
        if self.path == stem:
            return ""
        if self.path.startswith(stem + "."):
            return self.path[len(stem) + 1:]
        return self.path


class KeyAdded(_KeyChange):
    kind: Literal["added"] = "added"
    value: Any = Field(None, description="Value present only in the current document")


class KeyRemoved(_KeyChange):
    kind: Literal["removed"] = "removed"
    value: Any = Field(None, description="Value present only in the previous document")


class KeyModified(_KeyChange):
    kind: Literal["modified"] = "modified"
    old_value: Any = Field(None, description="Value in the previous document")
    new_value: Any = Field(None, description="Value in the current document")


Change = Annotated[
    Union[FolderAdded, FolderRemoved, FileAdded, FileRemoved, KeyAdded, KeyRemoved, KeyModified],
    Field(discriminator="kind"),
]

CHANGE_KINDS = (
    "added",
    "removed",
    "modified",
    "file-added",
    "file-removed",
    "folder-added",
    "folder-removed",
)


# Report Models
class ParseFailure(BaseModel):
    """A JSON document that could not be read or parsed."""
    model_config = ConfigDict(frozen=True)

    category: Category = Field(..., description="Category folder of the file")
    file_name: str = Field(..., description="File name relative to the category folder")
    side: Literal["previous", "current"] = Field(..., description="Snapshot the file belongs to")
    message: str = Field(..., description="Reader or parser error message")


class ConnectorReport(BaseModel):
    """All changes detected for one connector."""
    model_config = ConfigDict(frozen=True)

    connector: str = Field(..., description="Connector directory name")
    changes: List[Change] = Field(default_factory=list, description="Changes in discovery order")
    processing_error: Optional[str] = Field(None, description="Set when the connector could not be compared")
    parse_errors: List[ParseFailure] = Field(default_factory=list, description="Files treated as absent")


class CountSummary(BaseModel):
    total: int = 0
    by_severity: Dict[str, int] = Field(default_factory=lambda: {s.value: 0 for s in Severity})


class ChangeSummary(BaseModel):
    """Aggregate counts over a list of connector reports."""
    total_changes: int = Field(0, description="Number of changes across all connectors")
    by_severity: Dict[str, int] = Field(default_factory=lambda: {s.value: 0 for s in Severity})
    by_kind: Dict[str, int] = Field(default_factory=lambda: {k: 0 for k in CHANGE_KINDS})
    by_category: Dict[str, CountSummary] = Field(default_factory=dict)
    connectors: Dict[str, CountSummary] = Field(default_factory=dict)
    failed_connectors: List[str] = Field(default_factory=list, description="Connectors with a processing error")
